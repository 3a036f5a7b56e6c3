"""Provider-independent release model and harmonization logic."""
