"""Local file handler for exported artifacts (the device downloads folder)"""

from datetime import datetime
from typing import List, Optional
from pathlib import Path
import logging

from invoice_creator.config import settings

logger = logging.getLogger(__name__)


class FileHandler:
    """Writes exported artifacts to local storage"""
    
    def __init__(self, storage_path: Optional[str] = None):
        """
        Initialize file handler
        
        Args:
            storage_path: Export directory (defaults to settings.EXPORT_PATH)
        """
        self.storage_path = Path(storage_path or settings.EXPORT_PATH)
        self.storage_path.mkdir(parents=True, exist_ok=True)
        logger.info(f"Using local export storage at: {self.storage_path}")
    
    def save_artifact(self, file_content: bytes, file_name: str) -> dict:
        """
        Write one artifact, replacing any earlier file of the same name
        
        Args:
            file_content: File content as bytes
            file_name: Target file name; any directory part is dropped
            
        Returns:
            Dictionary with file information
        """
        stored_name = Path(file_name).name
        if not stored_name:
            raise ValueError(f"Invalid artifact file name: {file_name!r}")
        
        file_path = self.storage_path / stored_name
        file_path.write_bytes(file_content)
        
        result = {
            "file_path": file_path.as_posix(),
            "stored_name": stored_name,
            "size": len(file_content),
            "saved_date": datetime.utcnow(),
        }
        
        logger.info(f"Saved artifact '{stored_name}' to {self.storage_path}")
        return result
    
    def read_artifact(self, file_name: str) -> bytes:
        return (self.storage_path / Path(file_name).name).read_bytes()
    
    def list_artifacts(self) -> List[str]:
        return sorted(p.name for p in self.storage_path.iterdir() if p.is_file())
