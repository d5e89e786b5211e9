"""Content stub adapters."""

from shareseed.adapters.content.templates import DEFAULT_STUBS, TemplateStubProvider


__all__ = ["DEFAULT_STUBS", "TemplateStubProvider"]
