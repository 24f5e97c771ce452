"""
Shared route dependencies
"""
from typing import Optional
from fastapi import Header

from scanbonus.core import Messages, UnauthorizedException
from scanbonus.services import bonus_service, scan_service, BonusService, ScanService


def get_caller_id(x_user_id: Optional[str] = Header(default=None)) -> str:
    """Authenticated caller identity, forwarded by the auth proxy"""
    if not x_user_id or not x_user_id.strip():
        raise UnauthorizedException(Messages.MISSING_IDENTITY)
    return x_user_id.strip()


def get_scan_service() -> ScanService:
    return scan_service


def get_bonus_service() -> BonusService:
    return bonus_service
