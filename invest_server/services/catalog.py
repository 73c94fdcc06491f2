"""Static reference data used when live providers have nothing to offer."""

from __future__ import annotations

from dataclasses import dataclass, field

from invest_server.providers.models import MarketQuote, SymbolMatch


@dataclass
class ReferenceCatalog:
    """Known symbols with indicative prices, sectors and a mock market board.

    Injected into the services so tests and deployments can swap the tables
    without touching resolver logic.
    """

    prices: dict[str, float] = field(default_factory=dict)
    sectors: dict[str, str] = field(default_factory=dict)
    stocks: list[SymbolMatch] = field(default_factory=list)
    indices: list[MarketQuote] = field(default_factory=list)
    trending: list[MarketQuote] = field(default_factory=list)

    def price_for(self, symbol: str) -> float | None:
        return self.prices.get(symbol.strip().upper())

    def sector_for(self, symbol: str) -> str | None:
        return self.sectors.get(symbol.strip().upper())

    def search(self, query: str) -> list[SymbolMatch]:
        needle = query.strip().lower()
        if not needle:
            return []
        return [
            SymbolMatch(symbol=item.symbol, name=item.name, sector=item.sector, exchange=item.exchange)
            for item in self.stocks
            if needle in item.symbol.lower() or needle in item.name.lower()
        ]


def default_catalog() -> ReferenceCatalog:
    return ReferenceCatalog(
        prices={
            "RELIANCE": 2875.50,
            "TCS": 3980.25,
            "INFY": 1845.75,
            "HDFCBANK": 1678.90,
            "ICICIBANK": 1245.60,
            "ITC": 456.80,
            "SBIN": 825.45,
            "BHARTIARTL": 1598.30,
            "ASIANPAINT": 2890.15,
            "MARUTI": 11245.80,
            "NIFTY50": 24350.75,
            "SENSEX": 80125.30,
        },
        sectors={
            "RELIANCE": "Energy",
            "TCS": "Information Technology",
            "INFY": "Information Technology",
            "HDFCBANK": "Financial Services",
            "ICICIBANK": "Financial Services",
            "ITC": "FMCG",
            "SBIN": "Financial Services",
            "BHARTIARTL": "Telecom",
            "ASIANPAINT": "Paints",
            "MARUTI": "Automobile",
        },
        stocks=[
            SymbolMatch("RELIANCE", "Reliance Industries Ltd", "Energy", "NSE"),
            SymbolMatch("TCS", "Tata Consultancy Services Ltd", "IT", "NSE"),
            SymbolMatch("INFY", "Infosys Ltd", "IT", "NSE"),
            SymbolMatch("HDFCBANK", "HDFC Bank Ltd", "Banking", "NSE"),
            SymbolMatch("ICICIBANK", "ICICI Bank Ltd", "Banking", "NSE"),
            SymbolMatch("ITC", "ITC Ltd", "FMCG", "NSE"),
            SymbolMatch("SBIN", "State Bank of India", "Banking", "NSE"),
            SymbolMatch("BHARTIARTL", "Bharti Airtel Ltd", "Telecom", "NSE"),
        ],
        indices=[
            MarketQuote("NIFTY50", "Nifty 50", 24350.75, 0.8, "-", "2.5B"),
            MarketQuote("SENSEX", "BSE Sensex", 80125.30, 0.6, "-", "1.8B"),
            MarketQuote("BANKNIFTY", "Bank Nifty", 52890.45, -0.3, "-", "890M"),
        ],
        trending=[
            MarketQuote("RELIANCE", "Reliance Industries", 2875.50, -0.3, "Energy"),
            MarketQuote("TCS", "Tata Consultancy Services", 3980.25, 1.2, "IT"),
            MarketQuote("INFY", "Infosys Limited", 1845.75, 0.9, "IT"),
            MarketQuote("HDFCBANK", "HDFC Bank", 1678.90, -0.1, "Banking"),
            MarketQuote("ICICIBANK", "ICICI Bank", 1245.60, 0.5, "Banking"),
        ],
    )
