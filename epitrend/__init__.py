"""EpiTrend: COVID-19 case trend report with an automatic ARIMA forecast."""

__version__ = "0.1.0"
