from app.services.statistics import BlogStatisticsService

__all__ = ["BlogStatisticsService"]
