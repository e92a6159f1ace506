from .forecaster import SpendForecast, classify_forecast, forecast_portfolio, forecast_spend

__all__ = ["SpendForecast", "classify_forecast", "forecast_spend", "forecast_portfolio"]
