"""Core type definitions."""

from typing import NewType

# Opaque arena keys; pages and sections live in separate key spaces
PageKey = NewType("PageKey", int)
SectionKey = NewType("SectionKey", int)
