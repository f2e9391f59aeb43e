"""
Option resolver: turns a matched call into a path/pattern plus OptionsSpec.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Optional

from ..diagnostics import Diagnostics
from ..types import (
    DEFAULT_INCLUDE,
    EmbedCall,
    LiteralArg,
    OptionsLiteral,
    OptionsOnly,
    OptionsSpec,
    ResolvedCall,
    VariableBinding,
    VariableRef,
)

_FIELD_BY_KEY = {"basePath": "base_path", "include": "include", "encoding": "encoding"}


class OptionResolver:

    def __init__(self, marker: str, default_encoding: str, diagnostics: Diagnostics):
        self.marker = marker
        self.defaults = OptionsSpec(encoding=default_encoding)
        self.diagnostics = diagnostics

    def apply_options(self, props: OptionsLiteral) -> OptionsSpec:
        """Defaults overridden by literal option values; non-literal values keep the default."""
        spec = self.defaults
        for prop in props:
            if prop.value is None:
                self.diagnostics.warn(
                    f'Option "{prop.key}" for {self.marker} must be a string literal. Found type: {prop.node_type}',
                    prop.location,
                )
                continue
            spec = replace(spec, **{_FIELD_BY_KEY[prop.key]: prop.value})
        return spec

    def resolve(self, call: EmbedCall, bindings: VariableBinding) -> Optional[ResolvedCall]:
        form = call.form

        if isinstance(form, OptionsOnly):
            spec = self.apply_options(form.options)
            if spec.include == DEFAULT_INCLUDE:
                if not spec.base_path:
                    self.diagnostics.warn(
                        f"{self.marker} called with only an options object requires at least "
                        f"'include' or 'basePath' for a pattern.",
                        call.location,
                    )
                else:
                    self.diagnostics.warn(
                        f"{self.marker} called with only an options object requires an explicit 'include' pattern.",
                        call.location,
                    )
                return None
            path_or_pattern = spec.include

        else:
            if isinstance(form, LiteralArg):
                path_or_pattern = form.value
            elif isinstance(form, VariableRef):
                if form.name not in bindings:
                    self.diagnostics.warn(
                        f'Unable to resolve variable "{form.name}" for {self.marker} path/pattern. '
                        f"Only simple string literal assignments are supported.",
                        form.location,
                    )
                    return None
                path_or_pattern = bindings[form.name]
            else:
                raise TypeError(f"Unknown argument form: {form!r}")
            spec = self.apply_options(call.options)

        if not path_or_pattern:
            self.diagnostics.warn(f"Invalid or unresolved path/pattern argument for {self.marker}.", call.location)
            return None

        return ResolvedCall(path_or_pattern=path_or_pattern, options=spec)


__all__ = ["OptionResolver"]
