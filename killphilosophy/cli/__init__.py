"""
Command-line interface tools for the academic catalog.

These tools can be run directly from the command line:
    python -m killphilosophy.cli.enrich --academic "Michel Foucault"
    python -m killphilosophy.cli.query --search Foucault
    python -m killphilosophy.cli.export --output catalog.json
"""
