"""
Tests for the in-memory VCS fake and the adapter contract.
"""

from pathlib import Path

from forkpatch.adapters import InMemoryVcs, VcsAdapter


def _vcs(tmp_path: Path) -> InMemoryVcs:
    vcs = InMemoryVcs(tmp_path, remotes=["origin"])
    vcs.commit({"a.txt": "one\ntwo\n", "b.txt": "bee\n"})
    return vcs


class TestInMemoryVcs:
    def test_is_adapter(self, tmp_path: Path):
        vcs = _vcs(tmp_path)
        assert isinstance(vcs, VcsAdapter)
        assert vcs.is_available()
        assert "memory" in repr(vcs)

    def test_commit_writes_working_tree(self, tmp_path: Path):
        _vcs(tmp_path)
        assert (tmp_path / "a.txt").read_text() == "one\ntwo\n"

    def test_clean_diff_is_empty(self, tmp_path: Path):
        vcs = _vcs(tmp_path)
        r = vcs.diff_head(["a.txt", "b.txt"])
        assert r.ok
        assert r.output == ""

    def test_diff_shows_change(self, tmp_path: Path):
        vcs = _vcs(tmp_path)
        (tmp_path / "a.txt").write_text("one\nTWO\n")
        r = vcs.diff_head(["a.txt"])
        assert r.output.startswith("diff --git a/a.txt b/a.txt\n")
        assert "-two\n" in r.output
        assert "+TWO\n" in r.output

    def test_untracked_file_not_in_diff(self, tmp_path: Path):
        vcs = _vcs(tmp_path)
        (tmp_path / "new.txt").write_text("x\n")
        assert vcs.diff_head(["new.txt"]).output == ""

    def test_apply_round_trip(self, tmp_path: Path):
        vcs = _vcs(tmp_path)
        (tmp_path / "a.txt").write_text("one\nTWO\n")
        patch = tmp_path / "a.patch"
        patch.write_text(vcs.diff_head(["a.txt"]).output)

        assert vcs.checkout("HEAD", "a.txt").ok
        assert vcs.check_apply(patch).ok
        assert vcs.apply(patch).ok
        assert (tmp_path / "a.txt").read_text() == "one\nTWO\n"

        # Already applied: the preimage no longer matches
        assert vcs.check_apply(patch).failed

    def test_unknown_patch_fails(self, tmp_path: Path):
        vcs = _vcs(tmp_path)
        patch = tmp_path / "hand.patch"
        patch.write_text("not a patch\n")
        r = vcs.apply(patch)
        assert r.failed
        assert "unrecognized" in r.error

    def test_checkout_unknown_ref(self, tmp_path: Path):
        vcs = _vcs(tmp_path)
        r = vcs.checkout("upstream/main", "a.txt")
        assert r.failed
        assert "invalid reference" in r.error

    def test_checkout_from_ref(self, tmp_path: Path):
        vcs = _vcs(tmp_path)
        vcs.set_ref("origin/main", {"a.txt": "from origin\n"})
        assert vcs.checkout("origin/main", "a.txt").ok
        assert (tmp_path / "a.txt").read_text() == "from origin\n"

    def test_forced_failures(self, tmp_path: Path):
        vcs = _vcs(tmp_path)
        vcs.fail("checkout", "HEAD:a.txt")
        vcs.fail("diff", "b.txt")
        assert vcs.checkout("HEAD", "a.txt").failed
        assert vcs.diff_head(["a.txt", "b.txt"]).failed
        assert vcs.diff_head(["a.txt"]).ok

    def test_remotes(self, tmp_path: Path):
        vcs = _vcs(tmp_path)
        assert vcs.remotes().metadata["remotes"] == ["origin"]

    def test_call_log(self, tmp_path: Path):
        vcs = _vcs(tmp_path)
        vcs.diff_head(["a.txt"])
        vcs.checkout("HEAD", "b.txt")
        assert vcs.call_log == [("diff", "a.txt"), ("checkout", "HEAD:b.txt")]
        assert vcs.calls("checkout") == ["HEAD:b.txt"]
