"""Runtime plumbing for running node packs outside the host: settings, logging, CLI."""
