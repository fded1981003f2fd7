"""Pipeline stages: loader, preparation, forecasting, reporting."""
