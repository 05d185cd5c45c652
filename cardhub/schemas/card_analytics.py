"""Schemas for card usage analytics"""

from pydantic import BaseModel


class CardUsageStatisticsSchema(BaseModel):
    total_verifications: int
    successful_verifications: int
    failed_verifications: int
    success_rate: float
    by_type: dict[str, int]
    by_day: dict[str, int]
