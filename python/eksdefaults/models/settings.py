# eksdefaults/models/settings.py

from typing import Optional

from pydantic_settings import BaseSettings


class AWSSettings(BaseSettings):
    """
    Ambient AWS settings used when a cluster config leaves them blank.
    `region` maps to the `REGION` environment variable and `profile` to
    `AWS_PROFILE`. Both may be unset, in which case boto3 resolves its own
    defaults (AWS_DEFAULT_REGION, ~/.aws/config, ...).
    """

    region: Optional[str] = None
    aws_profile: Optional[str] = None

    class Config:
        # No prefix: REGION, AWS_PROFILE
        env_prefix = ""
