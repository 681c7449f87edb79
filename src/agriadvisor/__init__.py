"""Agri Advisor — farm advisories from a generative model, translated and rendered to PDF."""

__version__ = "1.0.0"
