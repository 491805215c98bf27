"""
Server configuration.

Read once from the environment at startup and passed to the tool handlers.
A ``.env`` file in the working directory (or a parent) is loaded first without overriding
variables that are already set.
"""

import os
from typing import Optional

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel

MISSING_VARIABLES_MESSAGE = (
    "Missing required environment variables: UPLOAD_URL, FILE_KEY, FILE_NAME"
)


class UploadConfig(BaseModel):
    """
    Upload target and multipart field names.

    Attributes:
        upload_url: Endpoint the multipart form is POSTed to (``UPLOAD_URL``).
        file_key: Form field name for the binary file part (``FILE_KEY``).
        file_name_key: Form field name for the file name string (``FILE_NAME``).
        extra_form: Raw JSON object of additional fields (``EXTRA_FORM``).
    """

    upload_url: Optional[str] = None
    file_key: Optional[str] = None
    file_name_key: Optional[str] = None
    extra_form: Optional[str] = None

    model_config = {"frozen": True}

    @classmethod
    def from_env(cls, load_env_file: bool = True) -> "UploadConfig":
        """Build the config from environment variables. Empty strings count as unset."""
        if load_env_file:
            load_dotenv(find_dotenv(usecwd=True))

        return cls(
            upload_url=os.getenv("UPLOAD_URL") or None,
            file_key=os.getenv("FILE_KEY") or None,
            file_name_key=os.getenv("FILE_NAME") or None,
            extra_form=os.getenv("EXTRA_FORM") or None,
        )

    def missing_variables(self) -> list[str]:
        """Names of the required environment variables that are not set."""
        required = {
            "UPLOAD_URL": self.upload_url,
            "FILE_KEY": self.file_key,
            "FILE_NAME": self.file_name_key,
        }
        return [name for name, value in required.items() if not value]

    @property
    def is_complete(self) -> bool:
        return not self.missing_variables()
