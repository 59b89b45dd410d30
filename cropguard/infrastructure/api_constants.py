"""
Store API endpoint constants and configuration.

This module contains all plot/plant store endpoint paths and related constants.
Centralizing these values makes it easy to swap out endpoints or update API versions.
"""


class StoreAPIEndpoints:
    """Plot store endpoint paths."""
    
    PLOT_BY_ID = "/plots/{plot_id}/"
    PLOT_PLANTS = "/plots/{plot_id}/plants/"
    FARM_PLOTS = "/farms/{farm_id}/plots/"
    PLANTS = "/plants/"
    PLANT_BY_ID = "/plants/{plant_id}/"
    PLANT_RECORDS = "/plants/{plant_id}/records/"
    
    @classmethod
    def plot(cls, plot_id: str) -> str:
        return cls.PLOT_BY_ID.format(plot_id=plot_id)
    
    @classmethod
    def plot_plants(cls, plot_id: str) -> str:
        return cls.PLOT_PLANTS.format(plot_id=plot_id)
    
    @classmethod
    def farm_plots(cls, farm_id: str) -> str:
        return cls.FARM_PLOTS.format(farm_id=farm_id)
    
    @classmethod
    def plant(cls, plant_id: str) -> str:
        return cls.PLANT_BY_ID.format(plant_id=plant_id)
    
    @classmethod
    def plant_records(cls, plant_id: str) -> str:
        return cls.PLANT_RECORDS.format(plant_id=plant_id)


class APIConstants:
    """General API configuration constants."""
    
    # HTTP Headers
    CONTENT_TYPE_JSON = "application/json"
    
    # Pagination
    DEFAULT_PAGE_SIZE = 100
