"""libgen -- scaffold contract, data-access, feature, infra and provider
libraries into a TypeScript monorepo."""

__version__ = "0.1.0"
