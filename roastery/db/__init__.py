"""
Record store for the roastery.

Tables:
- catalog (CatalogItem): finished, bagged coffee available for sale
- inventory (InventoryLot): raw bean lots delivered by vendors
"""
