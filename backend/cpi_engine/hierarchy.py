"""
City Prosperity Index hierarchy.

Dimension -> Sub-Dimension -> indicator keys. The tree is static
configuration shared by every city.
"""

from dataclasses import dataclass
from typing import Dict, Iterator, Optional, Tuple


@dataclass(frozen=True)
class SubDimension:
    key: str
    name: str
    indicators: Tuple[str, ...]


@dataclass(frozen=True)
class Dimension:
    key: str
    name: str
    sub_dimensions: Tuple[SubDimension, ...]


@dataclass(frozen=True)
class Hierarchy:
    """The full aggregation tree."""

    dimensions: Tuple[Dimension, ...]

    def indicator_keys(self) -> Iterator[str]:
        for dimension in self.dimensions:
            for sub_dimension in dimension.sub_dimensions:
                yield from sub_dimension.indicators

    def sub_dimension_for(self, indicator_key: str) -> Optional[SubDimension]:
        for dimension in self.dimensions:
            for sub_dimension in dimension.sub_dimensions:
                if indicator_key in sub_dimension.indicators:
                    return sub_dimension
        return None

    def to_dict(self) -> Dict:
        return {
            "dimensions": [
                {
                    "key": d.key,
                    "name": d.name,
                    "sub_dimensions": [
                        {"key": s.key, "name": s.name, "indicators": list(s.indicators)}
                        for s in d.sub_dimensions
                    ],
                }
                for d in self.dimensions
            ]
        }


CPI_HIERARCHY = Hierarchy(
    dimensions=(
        Dimension(
            key="productivity",
            name="Productivity",
            sub_dimensions=(
                SubDimension(
                    "economic_strength",
                    "Economic Growth",
                    ("city_product_per_capita", "old_age_dependency_ratio", "mean_household_income"),
                ),
                SubDimension(
                    "economic_agglomeration",
                    "Economic Agglomeration",
                    ("economic_density", "economic_specialization"),
                ),
                SubDimension(
                    "employment",
                    "Employment",
                    ("unemployment_rate", "employment_to_population_ratio", "informal_employment"),
                ),
            ),
        ),
        Dimension(
            key="infrastructure_development",
            name="Infrastructure Development",
            sub_dimensions=(
                SubDimension(
                    "housing_infrastructure",
                    "Housing Infrastructure",
                    (
                        "improved_shelter",
                        "improved_water",
                        "improved_sanitation",
                        "electricity",
                        "sufficient_living_area",
                        "population_density",
                    ),
                ),
                SubDimension(
                    "social_infrastructure",
                    "Social Infrastructure",
                    ("physician_density", "number_of_public_libraries"),
                ),
                SubDimension(
                    "ict",
                    "Information and Communication Technology",
                    ("internet_access", "home_computer_access", "average_broadband_speed"),
                ),
                SubDimension(
                    "urban_mobility",
                    "Urban Mobility",
                    (
                        "use_of_public_transport",
                        "average_daily_travel_time",
                        "length_of_mass_transport_network",
                        "traffic_fatalities",
                        "affordability_of_transport",
                    ),
                ),
                SubDimension(
                    "urban_form",
                    "Urban Form",
                    ("street_intersection_density", "street_density", "land_allocated_to_streets"),
                ),
            ),
        ),
        Dimension(
            key="quality_of_life",
            name="Quality of Life",
            sub_dimensions=(
                SubDimension(
                    "health",
                    "Health",
                    (
                        "life_expectancy_at_birth",
                        "under_five_mortality_rate",
                        "vaccination_coverage",
                        "maternal_mortality",
                    ),
                ),
                SubDimension(
                    "education",
                    "Education",
                    (
                        "literacy_rate",
                        "mean_years_of_schooling",
                        "early_childhood_education",
                        "net_enrollment_rate_in_higher_education",
                    ),
                ),
                SubDimension(
                    "safety_and_security",
                    "Safety and Security",
                    ("homicide_rate", "theft_rate"),
                ),
                SubDimension(
                    "public_space",
                    "Public Space",
                    ("accessibility_to_open_public_areas", "green_area_per_capita"),
                ),
            ),
        ),
        Dimension(
            key="equity_and_social_inclusion",
            name="Equity and Social Inclusion",
            sub_dimensions=(
                SubDimension(
                    "economic_equity",
                    "Economic Equity",
                    ("gini_coefficient", "poverty_rate"),
                ),
                SubDimension(
                    "social_inclusion",
                    "Social Inclusion",
                    ("slums_households", "youth_unemployment"),
                ),
                SubDimension(
                    "gender_inclusion",
                    "Gender Inclusion",
                    (
                        "equitable_secondary_school_enrollment",
                        "women_in_local_government",
                        "women_in_local_work_force",
                    ),
                ),
                SubDimension(
                    "urban_diversity",
                    "Urban Diversity",
                    ("land_use_mix",),
                ),
            ),
        ),
        Dimension(
            key="environmental_sustainability",
            name="Environmental Sustainability",
            sub_dimensions=(
                SubDimension(
                    "air_quality",
                    "Air Quality",
                    ("number_of_monitoring_stations", "pm25_concentration", "co2_emissions"),
                ),
                SubDimension(
                    "waste_management",
                    "Waste Management",
                    ("solid_waste_collection", "waste_water_treatment", "solid_waste_recycling_share"),
                ),
                SubDimension(
                    "sustainable_energy",
                    "Sustainable Energy",
                    ("share_of_renewable_energy",),
                ),
            ),
        ),
        Dimension(
            key="urban_governance_and_legislation",
            name="Urban Governance and Legislation",
            sub_dimensions=(
                SubDimension(
                    "participation",
                    "Participation",
                    ("voter_turnout", "access_to_public_information", "civic_participation"),
                ),
                SubDimension(
                    "municipal_financing_and_institutional_capacity",
                    "Municipal Financing and Institutional Capacity",
                    (
                        "own_revenue_collection",
                        "days_to_start_a_business",
                        "subnational_debt",
                        "local_expenditure_efficiency",
                    ),
                ),
                SubDimension(
                    "governance_of_urbanization",
                    "Governance of Urbanization",
                    ("land_use_efficiency",),
                ),
            ),
        ),
    )
)
