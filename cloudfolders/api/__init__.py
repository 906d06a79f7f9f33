"""API module for CloudFolders."""
