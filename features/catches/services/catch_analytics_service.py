import calendar
import logging
from typing import Dict, List

import pandas as pd

from features.catches.models.catch_types import CatchData, CatchStatistics, DailyCount, RankedCount
from features.catches.services.catch_log_service import CatchLogService
from features.equipment.models.equipment_types import FishSpecies

logger = logging.getLogger(__name__)

EMPTY_HISTORY_TIP = "Start logging your catches to get personalized recommendations!"

class CatchAnalyticsService:
    """Aggregates over a user's catch history.

    Months and days are taken in UTC.
    """

    def __init__(self, catch_log_service: CatchLogService):
        self.catch_log_service = catch_log_service

    def get_statistics(self, user_id: str) -> CatchStatistics:
        df = self._history_frame(user_id)
        return CatchStatistics(
            total_catches=len(df),
            by_species=self._count_by_species(df),
            by_location=self._count_by_location(df),
            by_month=self._count_by_month(df),
            average_size_by_species=self._average_by_species(df, "size"),
            average_weight_by_species=self._average_by_species(df, "weight"),
            most_successful_equipment=self._ranked_equipment(df),
            most_successful_locations=self._ranked_locations(df),
            catch_trend=self._catch_trend(df),
            tips=self._personalized_tips(df)
        )

    def get_catch_count_by_species(self, user_id: str) -> Dict[FishSpecies, int]:
        return self._count_by_species(self._history_frame(user_id))

    def get_catch_count_by_location(self, user_id: str) -> Dict[str, int]:
        return self._count_by_location(self._history_frame(user_id))

    def get_catch_count_by_month(self, user_id: str) -> Dict[int, int]:
        return self._count_by_month(self._history_frame(user_id))

    def get_average_size_by_species(self, user_id: str) -> Dict[FishSpecies, float]:
        return self._average_by_species(self._history_frame(user_id), "size")

    def get_average_weight_by_species(self, user_id: str) -> Dict[FishSpecies, float]:
        return self._average_by_species(self._history_frame(user_id), "weight")

    def get_most_successful_equipment(self, user_id: str) -> List[RankedCount]:
        return self._ranked_equipment(self._history_frame(user_id))

    def get_most_successful_locations(self, user_id: str) -> List[RankedCount]:
        return self._ranked_locations(self._history_frame(user_id))

    def get_catch_trend(self, user_id: str) -> List[DailyCount]:
        return self._catch_trend(self._history_frame(user_id))

    def get_personalized_recommendations(self, user_id: str) -> List[str]:
        return self._personalized_tips(self._history_frame(user_id))

    def _history_frame(self, user_id: str) -> pd.DataFrame:
        catches = self.catch_log_service.get_catch_history(user_id)
        return self.build_frame(catches)

    @staticmethod
    def build_frame(catches: List[CatchData]) -> pd.DataFrame:
        columns = ["timestamp", "location_id", "species", "size", "weight", "equipment_used"]
        df = pd.DataFrame(
            [
                {
                    "timestamp": c.timestamp,
                    "location_id": c.location_id,
                    "species": c.species.value,
                    "size": c.size,
                    "weight": c.weight,
                    "equipment_used": list(c.equipment_used)
                }
                for c in catches
            ],
            columns=columns
        )
        df["time"] = pd.to_datetime(df["timestamp"].astype(float), unit="s", utc=True)
        df["size"] = pd.to_numeric(df["size"])
        df["weight"] = pd.to_numeric(df["weight"])
        return df

    @staticmethod
    def _count_by_species(df: pd.DataFrame) -> Dict[FishSpecies, int]:
        return {FishSpecies(k): int(v) for k, v in df["species"].value_counts().items()}

    @staticmethod
    def _count_by_location(df: pd.DataFrame) -> Dict[str, int]:
        return {str(k): int(v) for k, v in df["location_id"].value_counts().items()}

    @staticmethod
    def _count_by_month(df: pd.DataFrame) -> Dict[int, int]:
        counts = df["time"].dt.month.value_counts().sort_index()
        return {int(k): int(v) for k, v in counts.items()}

    @staticmethod
    def _average_by_species(df: pd.DataFrame, column: str) -> Dict[FishSpecies, float]:
        measured = df.dropna(subset=[column])
        if measured.empty:
            return {}
        means = measured.groupby("species")[column].mean()
        return {FishSpecies(k): float(v) for k, v in means.items()}

    @staticmethod
    def _ranked_equipment(df: pd.DataFrame) -> List[RankedCount]:
        used = df["equipment_used"].explode().dropna()
        if used.empty:
            return []
        counts = used.value_counts()
        return [RankedCount(key=str(k), count=int(v)) for k, v in counts.items()]

    @staticmethod
    def _ranked_locations(df: pd.DataFrame) -> List[RankedCount]:
        counts = df["location_id"].value_counts()
        return [RankedCount(key=str(k), count=int(v)) for k, v in counts.items()]

    @staticmethod
    def _catch_trend(df: pd.DataFrame) -> List[DailyCount]:
        if df.empty:
            return []
        daily = df.groupby(df["time"].dt.date).size().sort_index()
        return [DailyCount(date=day.isoformat(), count=int(count)) for day, count in daily.items()]

    def _personalized_tips(self, df: pd.DataFrame) -> List[str]:
        if df.empty:
            return [EMPTY_HISTORY_TIP]

        tips = []

        species_counts = df["species"].value_counts()
        tips.append(f"You've had the most success catching {species_counts.idxmax()}.")

        location_counts = df["location_id"].value_counts()
        tips.append(f"Your most productive fishing spot is location {location_counts.idxmax()}.")

        top_equipment = [r.key for r in self._ranked_equipment(df)[:3]]
        if top_equipment:
            tips.append(f"Your most effective equipment includes: {', '.join(top_equipment)}.")

        month_counts = df["time"].dt.month.value_counts()
        best_month = calendar.month_name[int(month_counts.idxmax())]
        tips.append(f"Your best fishing month appears to be {best_month}.")

        return tips
