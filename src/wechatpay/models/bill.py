"""Bill models."""

from typing import Optional

from pydantic import BaseModel


class Bill(BaseModel):
    """Download descriptor returned when applying for a bill."""

    download_url: str
    hash_type: str = ""
    hash_value: str = ""
    tar_type: Optional[str] = None
