"""Models — source data, ReqIF object model and export settings."""
