"""
Cash Card Service - Services Layer
====================================

Service Inventory:
    - CashCardService: get / create / list operations over a CashCardStore
    - pagination: page/size/sort resolver producing PageQuery descriptors
"""
