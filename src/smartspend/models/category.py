"""Enumerated categories shared by the API, the CLI and the services."""

from __future__ import annotations

from enum import Enum


class Choice(str, Enum):
    """String enum whose value is the human-facing label."""

    @classmethod
    def values(cls) -> list[str]:
        return [m.value for m in cls]

    @classmethod
    def parse(cls, value: str) -> "Choice":
        """Look up a member by value, case-insensitively."""
        for member in cls:
            if member.value.lower() == value.strip().lower():
                return member
        raise ValueError(f"'{value}' is not a valid {cls.__name__}")


class BillCategory(Choice):
    RENT_MORTGAGE = "Rent / Mortgage"
    ELECTRICITY = "Electricity"
    WATER = "Water"
    INTERNET = "Internet"
    MOBILE_PHONE = "Mobile Phone"
    STREAMING = "Streaming Services"
    CREDIT_CARD = "Credit Card Payments"
    LOAN = "Loan Payments"
    INSURANCE = "Insurance (Health/Auto/Home)"
    GYM = "Gym Membership"
    TUITION = "School Tuition / Fees"
    CLOUD_SAAS = "Cloud / SaaS Services"
    TAXES = "Taxes"
    SECURITY = "Security / Alarm Services"
    OTHER_UTILITIES = "Other Utilities"


class ExpenseCategory(Choice):
    GROCERIES = "Groceries"
    DINING_OUT = "Dining Out"
    TRANSPORTATION = "Transportation"
    FUEL = "Fuel"
    PUBLIC_TRANSIT = "Public Transit"
    SHOPPING = "Shopping"
    ENTERTAINMENT = "Entertainment"
    TRAVEL = "Travel"
    HEALTH_FITNESS = "Health & Fitness"
    SUBSCRIPTIONS = "Subscriptions"
    GIFTS_DONATIONS = "Gifts & Donations"
    EDUCATION = "Education"
    PERSONAL_CARE = "Personal Care"
    MISCELLANEOUS = "Miscellaneous"


class PaymentMethod(Choice):
    CASH = "Cash"
    CREDIT_CARD = "Credit Card"
    DEBIT_CARD = "Debit Card"
    BANK_TRANSFER = "Bank Transfer"
    MOBILE_PAYMENT = "Mobile Payment"
    OTHER = "Other"


class WarrantyCategory(Choice):
    ELECTRONICS = "Electronics (Phones, Laptops, TVs)"
    HOME_APPLIANCES = "Home Appliances (Washer, Fridge, etc.)"
    FURNITURE = "Furniture"
    AUTOMOBILES = "Automobiles"
    POWER_TOOLS = "Power Tools"
    JEWELRY_WATCHES = "Jewelry & Watches"
    SPORTS_EQUIPMENT = "Sports Equipment"
    KITCHENWARE = "Kitchenware"
    CLOTHING_FOOTWEAR = "Clothing & Footwear"
    SMART_DEVICES = "Smart Devices (Smartwatch, Home Assistants)"
    MUSICAL_INSTRUMENTS = "Musical Instruments"
    OFFICE_EQUIPMENT = "Office Equipment"


class RecurringPeriod(Choice):
    WEEKLY = "Weekly"
    MONTHLY = "Monthly"
    QUARTERLY = "Quarterly"
    ANNUALLY = "Annually"
