"""Building blocks for Salesforce bulk jobs, streaming, record display, Apex test reports and DX logins."""

__version__ = "0.1.0"