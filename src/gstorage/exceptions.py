"""
Exception classes for the gstorage Python SDK
"""

from typing import Optional, Dict, Any


class GStorageError(Exception):
    """Base exception for all gstorage SDK errors"""
    
    def __init__(self, message: str, error_code: str = "UNKNOWN_ERROR", details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.error_code = error_code
        self.details = details or {}


class ValidationError(GStorageError):
    """Exception raised for validation failures"""
    pass


class CredentialsError(GStorageError):
    """Exception raised when key material or service account credentials cannot be loaded"""
    pass


class TransferError(GStorageError):
    """Exception raised for upload, download or delete failures against a signed URL"""
    
    def __init__(self, message: str, error_code: str = "TRANSFER_ERROR",
                 http_status: int = 0, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code, details)
        self.http_status = http_status
