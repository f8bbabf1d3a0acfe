"""TypeScript template generators, one module per library kind."""

from libgen.scaffolder.typescript.builder import CodeBuilder, Import, Interface, Property

__all__ = ["CodeBuilder", "Import", "Interface", "Property"]
