"""Line-oriented builder for TypeScript source files.

Template generators append headers, imports, comments, interfaces and raw
blocks to a ``CodeBuilder`` and call :meth:`CodeBuilder.render` once at the
end.  Output is a pure function of the calls made, so identical calls always
produce byte-identical files.

Example::

    builder = CodeBuilder()
    builder.add_file_header("Product Errors", "Domain errors")
    builder.add_imports([Import(source="effect", names=("Data",))])
    builder.add_blank_line()
    builder.add_raw("export const x = 1;\\n")
    content = builder.render()
"""

from __future__ import annotations

from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict

_SECTION_RULE = "// " + "=" * 76


class Import(BaseModel):
    """One ``import`` statement."""

    model_config = ConfigDict(frozen=True)

    source: str
    names: tuple[str, ...] = ()
    type_only: bool = False
    namespace: str | None = None


class Property(BaseModel):
    """One member of an interface."""

    model_config = ConfigDict(frozen=True)

    name: str
    type: str
    readonly: bool = False
    optional: bool = False
    doc: str | None = None


class Interface(BaseModel):
    """An ``interface`` declaration."""

    model_config = ConfigDict(frozen=True)

    name: str
    properties: tuple[Property, ...] = ()
    exported: bool = True
    doc: str | None = None
    extends: str | None = None


class CodeBuilder:
    """Accumulates TypeScript source text."""

    def __init__(self) -> None:
        self._chunks: list[str] = []

    # -- Structure ---------------------------------------------------------

    def add_file_header(
        self,
        title: str,
        description: str = "",
        sections: Iterable[str] = (),
    ) -> CodeBuilder:
        """Add the JSDoc block that opens every generated file."""
        lines = ["/**", f" * {title}"]
        if description:
            lines += [" *", f" * {description}"]
        body = list(sections)
        if body:
            lines.append(" *")
            lines += [f" * {line}".rstrip() for line in body]
        lines.append(" */")
        self._chunks.append("\n".join(lines) + "\n")
        return self

    def add_imports(self, imports: Iterable[Import]) -> CodeBuilder:
        for spec in imports:
            keyword = "import type" if spec.type_only else "import"
            if spec.namespace:
                self._chunks.append(
                    f'{keyword} * as {spec.namespace} from "{spec.source}";\n'
                )
            elif spec.names:
                names = ", ".join(spec.names)
                self._chunks.append(f'{keyword} {{ {names} }} from "{spec.source}";\n')
            else:
                self._chunks.append(f'import "{spec.source}";\n')
        return self

    def add_blank_line(self) -> CodeBuilder:
        self._chunks.append("\n")
        return self

    def add_comment(self, text: str) -> CodeBuilder:
        self._chunks.append(f"// {text}".rstrip() + "\n")
        return self

    def add_doc(self, text: str, indent: str = "") -> CodeBuilder:
        """Add a single-line JSDoc comment."""
        self._chunks.append(f"{indent}/** {text} */\n")
        return self

    def add_section_comment(self, title: str) -> CodeBuilder:
        self._chunks.append(f"{_SECTION_RULE}\n// {title}\n{_SECTION_RULE}\n")
        return self

    def add_interface(self, interface: Interface) -> CodeBuilder:
        if interface.doc:
            self.add_doc(interface.doc)
        prefix = "export " if interface.exported else ""
        extends = f" extends {interface.extends}" if interface.extends else ""
        lines = [f"{prefix}interface {interface.name}{extends} {{"]
        for prop in interface.properties:
            if prop.doc:
                lines.append(f"  /** {prop.doc} */")
            readonly = "readonly " if prop.readonly else ""
            optional = "?" if prop.optional else ""
            lines.append(f"  {readonly}{prop.name}{optional}: {prop.type};")
        lines.append("}")
        self._chunks.append("\n".join(lines) + "\n")
        return self

    def add_raw(self, text: str) -> CodeBuilder:
        """Append *text* verbatim."""
        self._chunks.append(text)
        return self

    def add_lines(self, lines: Iterable[str]) -> CodeBuilder:
        """Append each line followed by a newline."""
        for line in lines:
            self._chunks.append(f"{line}\n")
        return self

    # -- Output ------------------------------------------------------------

    def render(self) -> str:
        """Return the file content, ending in exactly one newline."""
        return "".join(self._chunks).rstrip("\n") + "\n"

    def clear(self) -> None:
        self._chunks.clear()

    def __str__(self) -> str:
        return self.render()
