"""Holdings domain package."""

from invest_server.portfolio.models import Holding, PortfolioSummary
from invest_server.portfolio.portfolio_service import PortfolioService

__all__ = ["Holding", "PortfolioService", "PortfolioSummary"]
