"""PrismaLens: AI image edits with a before/after comparison view."""

__version__ = "1.0.0"
