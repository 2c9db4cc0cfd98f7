"""Services — shared building blocks for the patch workflows."""
