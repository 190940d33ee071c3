"""
External APIs integration package.

This package contains clients for external API services.
"""

from .bytescale_client import BytescaleClient, DownloadResponse, UploadResult, build_url

__all__ = ['BytescaleClient', 'DownloadResponse', 'UploadResult', 'build_url']
