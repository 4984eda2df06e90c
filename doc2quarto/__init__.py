"""Doc2Quarto — convert Docusaurus markdown trees to Quarto."""

__version__ = "0.1.0"
