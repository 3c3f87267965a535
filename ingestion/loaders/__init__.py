from ingestion.loaders.sql_gateway import SQLBackendGateway

__all__ = ["SQLBackendGateway"]
