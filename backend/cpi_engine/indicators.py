"""
Indicator Definitions - declarative table of every standardized indicator.

Each entry names its inputs, the raw formula that derives the indicator value
from them, and the shape + benchmark parameters that turn the raw value into a
0-100 score. standardizer.py evaluates the table; nothing here does any
validation or clamping on its own.
"""

import math
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional, Sequence, Tuple, Union

from cpi_engine.errors import UnknownIndicatorError, ValidationError
from cpi_engine.shapes import HIGHER, LOWER

NUMBER = "number"
SERIES = "series"
MATRIX = "matrix"
SELECTION = "selection"

Values = Mapping[str, Any]
Params = Union[Mapping[str, Any], Callable[[Values], Mapping[str, Any]]]
Check = Callable[[Values], None]


@dataclass(frozen=True)
class InputField:
    """One named raw input of an indicator form."""

    name: str
    label: str
    kind: str = NUMBER
    positive: bool = False  # strictly greater than zero (denominators)
    min_length: int = 1  # series / matrix / selection only
    choices: Tuple[str, ...] = ()  # selection only


@dataclass(frozen=True)
class IndicatorDefinition:
    """Static definition of a single indicator."""

    key: str
    name: str
    unit: str
    inputs: Tuple[InputField, ...]
    raw: Callable[[Values], float]
    shape: str
    params: Params
    measure: Optional[Callable[[float, Values], float]] = None
    checks: Tuple[Check, ...] = ()
    banding: str = "default"

    def params_for(self, values: Values) -> Dict[str, Any]:
        """Benchmark parameters, resolved against the inputs when they depend on them."""
        if callable(self.params):
            return dict(self.params(values))
        return dict(self.params)

    def measured(self, raw: float, values: Values) -> float:
        """The quantity fed to the shape; the raw value unless the indicator rescales it."""
        if self.measure is None:
            return raw
        return self.measure(raw, values)

    @property
    def input_names(self) -> Tuple[str, ...]:
        return tuple(field.name for field in self.inputs)


# ----- Input helpers -----


def _num(name: str, label: str, positive: bool = False) -> InputField:
    return InputField(name=name, label=label, positive=positive)


def _series(name: str, label: str, positive: bool = False, min_length: int = 1) -> InputField:
    return InputField(name=name, label=label, kind=SERIES, positive=positive, min_length=min_length)


# ----- Cross-field checks -----


def _not_above(field: str, other: str) -> Check:
    def check(values: Values) -> None:
        if values[field] > values[other]:
            raise ValidationError(field, f"must not exceed {other}")

    return check


def _same_length(*fields: str) -> Check:
    def check(values: Values) -> None:
        expected = len(values[fields[0]])
        for field in fields[1:]:
            if len(values[field]) != expected:
                raise ValidationError(field, f"must have the same length as {fields[0]}")

    return check


def _whole_number(field: str, minimum: int) -> Check:
    def check(values: Values) -> None:
        value = values[field]
        if value != int(value) or value < minimum:
            raise ValidationError(field, f"must be a whole number of at least {minimum}")

    return check


def _length_equals(series: str, count: str) -> Check:
    def check(values: Values) -> None:
        if len(values[series]) != int(values[count]):
            raise ValidationError(series, f"must contain exactly {count} entries")

    return check


def _growth_positive(later: str, earlier: str) -> Check:
    def check(values: Values) -> None:
        if values[later] <= values[earlier]:
            raise ValidationError(later, f"must be greater than {earlier} for a growth rate")

    return check


def _proportions(field: str) -> Check:
    def check(values: Values) -> None:
        for cell in values[field]:
            for share in cell:
                if share > 1:
                    raise ValidationError(field, "proportions must lie between 0 and 1")

    return check


def _first_positive(field: str) -> Check:
    def check(values: Values) -> None:
        if values[field][0] <= 0:
            raise ValidationError(field, "first entry must be greater than zero")

    return check


def _nonzero_mean(field: str) -> Check:
    def check(values: Values) -> None:
        if sum(values[field]) <= 0:
            raise ValidationError(field, "must not sum to zero")

    return check


# ----- Raw formulas -----


def _share(numerator: str, denominator: str, per: float = 100.0) -> Callable[[Values], float]:
    return lambda v: v[numerator] / v[denominator] * per


def _value(name: str) -> Callable[[Values], float]:
    return lambda v: float(v[name])


def _city_product_per_capita(v: Values) -> float:
    product = sum(
        national * city / employed
        for national, employed, city in zip(
            v["national_product"], v["national_employment"], v["city_employment"]
        )
    )
    return product / v["city_population"] * v["ppp_rate"]


def _herfindahl(v: Values) -> float:
    return sum(share ** 2 for share in v["shares"])


def _normalized_herfindahl(raw: float, v: Values) -> float:
    n = v["number_of_industries"]
    return (raw - 1 / n) / (1 - 1 / n)


def _specialization_benchmark(v: Values) -> Dict[str, float]:
    n = v["number_of_industries"]
    return {"target": (0.25 - 1 / n) / (1 - 1 / n)}


def _gini(v: Values) -> float:
    incomes = sorted(v["incomes"])
    n = len(incomes)
    mean = sum(incomes) / n
    # sum over all pairs |xi - xj| from the sorted ranks
    weighted = sum((2 * i - n + 1) * x for i, x in enumerate(incomes))
    return 2 * weighted / (2 * n * n * mean)


def _shannon_mix(v: Values) -> float:
    cells = v["cells"]
    total = 0.0
    for cell in cells:
        total += -sum(p * math.log(p) for p in cell if p > 0)
    return total / len(cells)


def _mean(name: str) -> Callable[[Values], float]:
    return lambda v: sum(v[name]) / len(v[name])


def _life_expectancy(v: Values) -> float:
    return sum(v["tx"]) / v["lx"][0]


def _mean_years_of_schooling(v: Values) -> float:
    return sum(p * d for p, d in zip(v["proportions"], v["durations"]))


def _equitable_enrollment(v: Values) -> float:
    female = v["female_enrollment"] / v["female_school_age_population"]
    male = v["male_enrollment"] / v["male_school_age_population"]
    return female / male


def _land_use_efficiency(v: Values) -> float:
    years = v["years"]
    urban_growth = ((v["urban_area_end"] - v["urban_area_start"]) / v["urban_area_start"]) ** (1 / years)
    population_growth = (
        (v["population_end"] - v["population_start"]) / v["population_start"]
    ) ** (1 / years)
    return urban_growth / population_growth


def _required_stations(v: Values) -> Dict[str, float]:
    pm10 = v["pm10_concentration"]
    if pm10 >= 48:
        people_per_station = 125000
    elif pm10 >= 32:
        people_per_station = 250000
    else:
        people_per_station = 500000
    return {"min": 0.0, "max": v["population"] / people_per_station}


def _capped_share(numerator: str, denominator: str) -> Callable[[Values], float]:
    return lambda v: min(100.0, v[numerator] / v[denominator] * 100)


def _transport_affordability(v: Values) -> float:
    # 60 trips a month against monthly income
    return 60 * v["cost_per_trip"] * 100 / v["monthly_income"]


PUBLIC_INFORMATION_ELEMENTS: Tuple[str, ...] = (
    "Budgets and spending",
    "Senior salaries",
    "Organizational chart",
    "Copies of contracts and tenders",
    "Access to statistics",
    "Posting public notices on meetings, resolution, etc.",
    "Local reporting complaints, concerns, and emergencies",
    "Results of local elections",
    "Tax information",
    "Open tendering procedures",
)


# ----- Indicator table -----

_DEFINITIONS: Sequence[IndicatorDefinition] = (
    # Productivity / Economic Growth
    IndicatorDefinition(
        key="city_product_per_capita",
        name="City Product per Capita",
        unit="PPP$",
        inputs=(
            _series("national_product", "National product by sector"),
            _series("national_employment", "National employment by sector", positive=True),
            _series("city_employment", "City employment by sector"),
            _num("city_population", "City population", positive=True),
            _num("ppp_rate", "PPP conversion rate", positive=True),
        ),
        raw=_city_product_per_capita,
        shape="transformed",
        params={
            "transform": "log", "min": 714.64, "max": 108818.96,
            "t_floor": 6.57, "t_ceiling": 11.60, "better": HIGHER,
        },
        checks=(_same_length("national_product", "national_employment", "city_employment"),),
    ),
    IndicatorDefinition(
        key="old_age_dependency_ratio",
        name="Old Age Dependency Ratio",
        unit="%",
        inputs=(
            _num("population_65_and_over", "Population aged 65 and over"),
            _num("population_15_to_64", "Population aged 15 to 64", positive=True),
        ),
        raw=_share("population_65_and_over", "population_15_to_64"),
        shape="transformed",
        params={"transform": "log", "min": 2.92, "max": 40.53, "better": LOWER},
    ),
    IndicatorDefinition(
        key="mean_household_income",
        name="Mean Household Income",
        unit="PPP$",
        inputs=(_num("mean_household_income", "Mean household income", positive=True),),
        raw=_value("mean_household_income"),
        shape="transformed",
        params={"transform": "log", "min": 6315, "max": 44773, "better": HIGHER},
    ),
    # Productivity / Economic Agglomeration
    IndicatorDefinition(
        key="economic_density",
        name="Economic Density",
        unit="PPP$/km²",
        inputs=(
            _num("city_product", "City product"),
            _num("city_area", "City area (km²)", positive=True),
        ),
        raw=_share("city_product", "city_area", per=1.0),
        shape="deviation",
        params={"target": 857.37},
    ),
    IndicatorDefinition(
        key="economic_specialization",
        name="Economic Specialization",
        unit="HHI",
        inputs=(
            _series("shares", "Industry shares (decimals)"),
            _num("number_of_industries", "Number of industries", positive=True),
        ),
        raw=_herfindahl,
        shape="deviation",
        params=_specialization_benchmark,
        measure=_normalized_herfindahl,
        checks=(
            _whole_number("number_of_industries", 2),
            _length_equals("shares", "number_of_industries"),
        ),
    ),
    # Productivity / Employment
    IndicatorDefinition(
        key="unemployment_rate",
        name="Unemployment Rate",
        unit="%",
        inputs=(
            _num("unemployed", "Unemployed persons"),
            _num("labour_force", "Labour force", positive=True),
        ),
        raw=_share("unemployed", "labour_force"),
        shape="transformed",
        params={"transform": "root4", "min": 1, "max": 28.2, "better": LOWER},
        checks=(_not_above("unemployed", "labour_force"),),
    ),
    IndicatorDefinition(
        key="employment_to_population_ratio",
        name="Employment to Population Ratio",
        unit="%",
        inputs=(
            _num("employed", "Employed persons"),
            _num("working_age_population", "Working age population", positive=True),
        ),
        raw=_share("employed", "working_age_population"),
        shape="linear",
        params={"min": 30.5, "max": 75},
        checks=(_not_above("employed", "working_age_population"),),
    ),
    IndicatorDefinition(
        key="informal_employment",
        name="Informal Employment",
        unit="%",
        inputs=(
            _num("informal_employees", "Informal employees"),
            _num("total_employed", "Total employed persons", positive=True),
        ),
        raw=_share("informal_employees", "total_employed"),
        shape="transformed",
        params={"transform": "root4", "min": 11, "max": 75, "better": LOWER},
        checks=(_not_above("informal_employees", "total_employed"),),
    ),
    # Infrastructure Development / Housing Infrastructure
    IndicatorDefinition(
        key="improved_shelter",
        name="Improved Shelter",
        unit="%",
        inputs=(
            _num("durable_households", "Households in durable structures"),
            _num("total_households", "Total households", positive=True),
        ),
        raw=_share("durable_households", "total_households"),
        shape="linear",
        params={"min": 84.8, "max": 98.4},
        checks=(_not_above("durable_households", "total_households"),),
        banding="shelter",
    ),
    IndicatorDefinition(
        key="improved_sanitation",
        name="Improved Sanitation",
        unit="%",
        inputs=(
            _num("improved_sanitation_households", "Households with improved sanitation"),
            _num("total_households", "Total households", positive=True),
        ),
        raw=_share("improved_sanitation_households", "total_households"),
        shape="linear",
        params={"min": 15, "max": 100},
        checks=(_not_above("improved_sanitation_households", "total_households"),),
    ),
    IndicatorDefinition(
        key="electricity",
        name="Access to Electricity",
        unit="%",
        inputs=(
            _num("electrified_households", "Households with electricity"),
            _num("total_households", "Total households", positive=True),
        ),
        raw=_share("electrified_households", "total_households"),
        shape="linear",
        params={"min": 15, "max": 100},
        checks=(_not_above("electrified_households", "total_households"),),
    ),
    IndicatorDefinition(
        key="sufficient_living_area",
        name="Sufficient Living Area",
        unit="%",
        inputs=(
            _num("sufficient_area_households", "Households with sufficient living area"),
            _num("total_households", "Total households", positive=True),
        ),
        raw=_share("sufficient_area_households", "total_households"),
        shape="transformed",
        params={"transform": "root4", "min": 2.5, "max": 57.8, "better": HIGHER},
        checks=(_not_above("sufficient_area_households", "total_households"),),
    ),
    IndicatorDefinition(
        key="population_density",
        name="Population Density",
        unit="inhabitants/km²",
        inputs=(
            _num("population", "City population"),
            _num("urban_area", "Urban area (km²)", positive=True),
        ),
        raw=_share("population", "urban_area", per=1.0),
        shape="deviation",
        params={"target": 15000},
    ),
    # Infrastructure Development / Social Infrastructure
    IndicatorDefinition(
        key="physician_density",
        name="Physician Density",
        unit="per 1,000",
        inputs=(
            _num("physicians", "Number of physicians"),
            _num("population", "City population", positive=True),
        ),
        raw=_share("physicians", "population", per=1000.0),
        shape="transformed",
        params={"transform": "sqrt", "min": 0.01, "max": 7.74, "better": HIGHER, "scale": 1000.0},
    ),
    # Infrastructure Development / ICT
    IndicatorDefinition(
        key="internet_access",
        name="Internet Access",
        unit="%",
        inputs=(
            _num("internet_households", "Households with internet access"),
            _num("total_households", "Total households", positive=True),
        ),
        raw=_share("internet_households", "total_households"),
        shape="deviation",
        params={"target": 100, "span": 100},
        checks=(_not_above("internet_households", "total_households"),),
    ),
    IndicatorDefinition(
        key="home_computer_access",
        name="Home Computer Access",
        unit="%",
        inputs=(
            _num("computer_households", "Households with a computer"),
            _num("total_households", "Total households", positive=True),
        ),
        raw=_share("computer_households", "total_households"),
        shape="deviation",
        params={"target": 100, "span": 100},
        checks=(_not_above("computer_households", "total_households"),),
    ),
    IndicatorDefinition(
        key="average_broadband_speed",
        name="Average Broadband Speed",
        unit="Mbps",
        inputs=(_series("speeds", "Broadband speeds for the month (Mbps)"),),
        raw=_mean("speeds"),
        shape="transformed",
        params={"transform": "cbrt", "min": 470 / 8, "max": 87088 / 8, "better": LOWER},
    ),
    # Infrastructure Development / Urban Mobility
    IndicatorDefinition(
        key="use_of_public_transport",
        name="Use of Public Transport",
        unit="%",
        inputs=(
            _num("public_transport_trips", "Trips by public transport"),
            _num("total_trips", "Total trips", positive=True),
        ),
        raw=_share("public_transport_trips", "total_trips"),
        shape="three_zone",
        params={"lower": 5.95, "upper": 62.16, "better": HIGHER},
        checks=(_not_above("public_transport_trips", "total_trips"),),
    ),
    IndicatorDefinition(
        key="average_daily_travel_time",
        name="Average Daily Travel Time",
        unit="minutes",
        inputs=(_num("travel_time", "Average daily travel time (minutes)"),),
        raw=_value("travel_time"),
        shape="deviation",
        params={"target": 30, "penalize": "above"},
    ),
    IndicatorDefinition(
        key="length_of_mass_transport_network",
        name="Length of Mass Transport Network",
        unit="km per 1,000,000",
        inputs=(
            _num("network_length", "Mass transport network length (km)"),
            _num("population", "City population", positive=True),
        ),
        raw=_share("network_length", "population", per=1_000_000.0),
        shape="deviation",
        params={"target": 80, "penalize": "below"},
    ),
    IndicatorDefinition(
        key="traffic_fatalities",
        name="Traffic Fatalities",
        unit="per 100,000",
        inputs=(
            _num("fatalities", "Traffic fatalities"),
            _num("population", "City population", positive=True),
        ),
        raw=_share("fatalities", "population", per=100_000.0),
        shape="inverse_linear",
        params={"min": 1, "max": 31},
    ),
    IndicatorDefinition(
        key="affordability_of_transport",
        name="Affordability of Transport",
        unit="% of income",
        inputs=(
            _num("cost_per_trip", "Cost of a single trip", positive=True),
            _num("monthly_income", "Monthly income per capita", positive=True),
        ),
        raw=_transport_affordability,
        shape="three_zone",
        params={"lower": 4, "upper": 26, "better": LOWER},
    ),
    # Infrastructure Development / Urban Form
    IndicatorDefinition(
        key="street_density",
        name="Street Density",
        unit="km/km²",
        inputs=(
            _num("street_length", "Total street length (km)"),
            _num("urban_surface", "Urban surface (km²)", positive=True),
        ),
        raw=_share("street_length", "urban_surface", per=1.0),
        shape="deviation",
        params={"target": 20},
    ),
    IndicatorDefinition(
        key="land_allocated_to_streets",
        name="Land Allocated to Streets",
        unit="%",
        inputs=(
            _num("street_area", "Street area (km²)", positive=True),
            _num("total_area", "Total urban area (km²)", positive=True),
        ),
        raw=_share("street_area", "total_area"),
        shape="linear",
        params={"min": 6, "max": 36},
        checks=(_not_above("street_area", "total_area"),),
    ),
    # Quality of Life / Health
    IndicatorDefinition(
        key="life_expectancy_at_birth",
        name="Life Expectancy at Birth",
        unit="years",
        inputs=(
            _series("lx", "Survivors at age x (lx)"),
            _series("tx", "Person-years lived above age x (Tx)"),
        ),
        raw=_life_expectancy,
        shape="linear",
        params={"min": 49, "max": 83.48},
        checks=(_same_length("lx", "tx"), _first_positive("lx")),
    ),
    IndicatorDefinition(
        key="under_five_mortality_rate",
        name="Under-Five Mortality Rate",
        unit="per 1,000 live births",
        inputs=(
            _num("under_five_deaths", "Deaths under age five"),
            _num("live_births", "Live births", positive=True),
        ),
        raw=_share("under_five_deaths", "live_births", per=1000.0),
        shape="transformed",
        params={"transform": "log", "min": 2.20, "max": 181.60, "better": LOWER},
    ),
    IndicatorDefinition(
        key="vaccination_coverage",
        name="Vaccination Coverage",
        unit="%",
        inputs=(
            _num("vaccinated_children", "Fully vaccinated children"),
            _num("target_children", "Children in the target group", positive=True),
        ),
        raw=_capped_share("vaccinated_children", "target_children"),
        shape="three_zone",
        params={"lower": 50, "upper": 100, "better": HIGHER},
    ),
    IndicatorDefinition(
        key="maternal_mortality",
        name="Maternal Mortality",
        unit="per 100,000 live births",
        inputs=(
            _num("maternal_deaths", "Maternal deaths"),
            _num("live_births", "Live births", positive=True),
        ),
        raw=_share("maternal_deaths", "live_births", per=100_000.0),
        shape="transformed",
        params={"transform": "log", "min": 1, "max": 1100, "better": LOWER},
    ),
    # Quality of Life / Education
    IndicatorDefinition(
        key="literacy_rate",
        name="Literacy Rate",
        unit="%",
        inputs=(
            _num("literate_population", "Literate population aged 15+"),
            _num("total_population", "Population aged 15+", positive=True),
        ),
        raw=_share("literate_population", "total_population"),
        shape="linear",
        params={"min": 15, "max": 99.9},
        checks=(_not_above("literate_population", "total_population"),),
    ),
    IndicatorDefinition(
        key="mean_years_of_schooling",
        name="Mean Years of Schooling",
        unit="years",
        inputs=(
            _series("proportions", "Population share by attainment level"),
            _series("durations", "Official duration of each level (years)"),
        ),
        raw=_mean_years_of_schooling,
        shape="linear",
        params={"min": 0, "max": 14},
        checks=(_same_length("proportions", "durations"),),
    ),
    IndicatorDefinition(
        key="early_childhood_education",
        name="Early Childhood Education",
        unit="%",
        inputs=(
            _num("enrolled_children", "Children in early childhood programmes"),
            _num("total_children", "Children of the relevant age", positive=True),
        ),
        raw=_share("enrolled_children", "total_children"),
        shape="linear",
        params={"min": 20, "max": 80},
        checks=(_not_above("enrolled_children", "total_children"),),
    ),
    IndicatorDefinition(
        key="net_enrollment_rate_in_higher_education",
        name="Net Enrolment Rate in Higher Education",
        unit="%",
        inputs=(
            _num("enrolled_students", "Enrolled students of the official age"),
            _num("age_group_population", "Population of the official age", positive=True),
        ),
        raw=_capped_share("enrolled_students", "age_group_population"),
        shape="linear",
        params={"min": 10, "max": 80},
    ),
    # Quality of Life / Safety and Security
    IndicatorDefinition(
        key="homicide_rate",
        name="Homicide Rate",
        unit="per 100,000",
        inputs=(
            _num("homicides", "Homicides"),
            _num("population", "City population", positive=True),
        ),
        raw=_share("homicides", "population", per=100_000.0),
        shape="transformed",
        params={"transform": "log", "min": 1, "max": 1654, "better": LOWER},
    ),
    IndicatorDefinition(
        key="theft_rate",
        name="Theft Rate",
        unit="per 100,000",
        inputs=(
            _num("thefts", "Reported thefts"),
            _num("population", "City population", positive=True),
        ),
        raw=_share("thefts", "population", per=100_000.0),
        shape="transformed",
        params={"transform": "root4", "min": 25.45, "max": 6159.11, "better": LOWER},
    ),
    # Quality of Life / Public Space
    IndicatorDefinition(
        key="accessibility_to_open_public_areas",
        name="Accessibility to Open Public Areas",
        unit="%",
        inputs=(
            _num("population_within_400m", "Population within 400 m of open public space"),
            _num("population", "City population", positive=True),
        ),
        raw=_share("population_within_400m", "population"),
        shape="linear",
        params={"min": 50, "max": 100},
        checks=(_not_above("population_within_400m", "population"),),
    ),
    IndicatorDefinition(
        key="green_area_per_capita",
        name="Green Area per Capita",
        unit="m²/inhabitant",
        inputs=(
            _num("green_area", "Green area (m²)"),
            _num("population", "City population", positive=True),
        ),
        raw=_share("green_area", "population", per=1.0),
        shape="linear",
        params={"min": 0, "max": 15},
    ),
    # Equity and Social Inclusion / Economic Equity
    IndicatorDefinition(
        key="gini_coefficient",
        name="Gini Coefficient",
        unit="index",
        inputs=(_series("incomes", "Household incomes", min_length=2),),
        raw=_gini,
        shape="inverse_linear",
        params={"min": 0.24, "max": 0.63},
        checks=(_nonzero_mean("incomes"),),
    ),
    IndicatorDefinition(
        key="poverty_rate",
        name="Poverty Rate",
        unit="%",
        inputs=(
            _num("poor_population", "Population below the poverty line"),
            _num("total_population", "Total population", positive=True),
        ),
        raw=_share("poor_population", "total_population"),
        shape="transformed",
        params={"transform": "root4", "t_min": 0.38, "t_max": 3.00, "better": LOWER},
        checks=(_not_above("poor_population", "total_population"),),
    ),
    # Equity and Social Inclusion / Social Inclusion
    IndicatorDefinition(
        key="slums_households",
        name="Slum Households",
        unit="%",
        inputs=(
            _num("slum_population", "Population living in slums"),
            _num("city_population", "City population", positive=True),
        ),
        raw=_share("slum_population", "city_population"),
        shape="three_zone",
        params={"lower": 0, "upper": 80, "better": LOWER},
        checks=(_not_above("slum_population", "city_population"),),
    ),
    IndicatorDefinition(
        key="youth_unemployment",
        name="Youth Unemployment",
        unit="%",
        inputs=(
            _num("unemployed_youth", "Unemployed youth"),
            _num("youth_labour_force", "Youth labour force", positive=True),
        ),
        raw=_share("unemployed_youth", "youth_labour_force"),
        shape="transformed",
        params={
            "transform": "root4", "min": 2.7, "max": 62.8,
            "t_floor": 1.28, "t_ceiling": 2.82, "better": LOWER,
        },
        checks=(_not_above("unemployed_youth", "youth_labour_force"),),
    ),
    # Equity and Social Inclusion / Gender Inclusion
    IndicatorDefinition(
        key="equitable_secondary_school_enrollment",
        name="Equitable Secondary School Enrolment",
        unit="ratio",
        inputs=(
            _num("female_enrollment", "Girls enrolled in secondary school"),
            _num("female_school_age_population", "Girls of secondary school age", positive=True),
            _num("male_enrollment", "Boys enrolled in secondary school", positive=True),
            _num("male_school_age_population", "Boys of secondary school age", positive=True),
        ),
        raw=_equitable_enrollment,
        shape="deviation",
        params={"target": 1},
    ),
    IndicatorDefinition(
        key="women_in_local_government",
        name="Women in Local Government",
        unit="%",
        inputs=(
            _num("women_in_government", "Seats held by women"),
            _num("total_government_seats", "Total seats", positive=True),
        ),
        raw=_share("women_in_government", "total_government_seats"),
        shape="deviation",
        params={"target": 50},
        checks=(_not_above("women_in_government", "total_government_seats"),),
    ),
    IndicatorDefinition(
        key="women_in_local_work_force",
        name="Women in the Local Work Force",
        unit="%",
        inputs=(
            _num("women_in_workforce", "Women in non-agricultural wage employment"),
            _num("total_non_agricultural_employment", "Total non-agricultural wage employment", positive=True),
        ),
        raw=_share("women_in_workforce", "total_non_agricultural_employment"),
        shape="deviation",
        params={"target": 50},
        checks=(_not_above("women_in_workforce", "total_non_agricultural_employment"),),
    ),
    # Equity and Social Inclusion / Urban Diversity
    IndicatorDefinition(
        key="land_use_mix",
        name="Land Use Mix",
        unit="Shannon index",
        inputs=(InputField("cells", "Land-use proportions per grid cell", kind=MATRIX),),
        raw=_shannon_mix,
        shape="linear",
        params={"min": 0, "max": 1.61},
        checks=(_proportions("cells"),),
    ),
    # Environmental Sustainability / Air Quality
    IndicatorDefinition(
        key="number_of_monitoring_stations",
        name="Number of Monitoring Stations",
        unit="stations",
        inputs=(
            _num("stations", "Air quality monitoring stations"),
            _num("population", "City population", positive=True),
            _num("pm10_concentration", "Annual mean PM10 (µg/m³)"),
        ),
        raw=_value("stations"),
        shape="linear",
        params=_required_stations,
    ),
    IndicatorDefinition(
        key="pm25_concentration",
        name="PM2.5 Concentration",
        unit="µg/m³",
        inputs=(_num("pm25", "Annual mean PM2.5 (µg/m³)"),),
        raw=_value("pm25"),
        shape="three_zone",
        params={"lower": 10, "upper": 20, "better": LOWER},
    ),
    IndicatorDefinition(
        key="co2_emissions",
        name="CO2 Emissions",
        unit="metric tonnes per capita",
        inputs=(_num("co2", "CO2 emissions per capita"),),
        raw=_value("co2"),
        shape="transformed",
        params={"transform": "root5", "t_min": 0.39, "t_max": 2.09, "better": LOWER},
    ),
    # Environmental Sustainability / Waste Management
    IndicatorDefinition(
        key="solid_waste_collection",
        name="Solid Waste Collection",
        unit="%",
        inputs=(
            _num("collected_waste", "Solid waste collected"),
            _num("generated_waste", "Solid waste generated", positive=True),
        ),
        raw=_share("collected_waste", "generated_waste"),
        shape="linear",
        params={"min": 0, "max": 100},
        checks=(_not_above("collected_waste", "generated_waste"),),
    ),
    IndicatorDefinition(
        key="waste_water_treatment",
        name="Waste Water Treatment",
        unit="%",
        inputs=(
            _num("treated_waste_water", "Waste water treated"),
            _num("produced_waste_water", "Waste water produced", positive=True),
        ),
        raw=_share("treated_waste_water", "produced_waste_water"),
        shape="linear",
        params={"min": 0, "max": 100},
        checks=(_not_above("treated_waste_water", "produced_waste_water"),),
    ),
    IndicatorDefinition(
        key="solid_waste_recycling_share",
        name="Solid Waste Recycling Share",
        unit="%",
        inputs=(
            _num("recycled_waste", "Solid waste recycled"),
            _num("collected_waste", "Solid waste collected", positive=True),
        ),
        raw=_share("recycled_waste", "collected_waste"),
        shape="deviation",
        params={"target": 50, "penalize": "below"},
        checks=(_not_above("recycled_waste", "collected_waste"),),
    ),
    # Environmental Sustainability / Sustainable Energy
    IndicatorDefinition(
        key="share_of_renewable_energy",
        name="Share of Renewable Energy",
        unit="%",
        inputs=(
            _num("renewable_energy", "Energy from renewable sources"),
            _num("total_energy", "Total energy consumption", positive=True),
        ),
        raw=_share("renewable_energy", "total_energy"),
        shape="linear",
        params={"min": 0, "max": 20},
        checks=(_not_above("renewable_energy", "total_energy"),),
    ),
    # Urban Governance and Legislation / Participation
    IndicatorDefinition(
        key="voter_turnout",
        name="Voter Turnout",
        unit="%",
        inputs=(
            _num("votes_cast", "Votes cast in the last local election"),
            _num("eligible_voters", "Registered eligible voters", positive=True),
        ),
        raw=_share("votes_cast", "eligible_voters"),
        shape="linear",
        params={"min": 0, "max": 100},
        checks=(_not_above("votes_cast", "eligible_voters"),),
    ),
    IndicatorDefinition(
        key="access_to_public_information",
        name="Access to Public Information",
        unit="%",
        inputs=(
            InputField(
                "published_elements",
                "E-government elements published by the city",
                kind=SELECTION,
                min_length=0,
                choices=PUBLIC_INFORMATION_ELEMENTS,
            ),
        ),
        raw=lambda v: len(v["published_elements"]) / len(PUBLIC_INFORMATION_ELEMENTS) * 100,
        shape="linear",
        params={"min": 0, "max": 100},
    ),
    IndicatorDefinition(
        key="civic_participation",
        name="Civic Participation",
        unit="%",
        inputs=(
            _num("engaged_adults", "Adults engaged in civic activities"),
            _num("adult_population", "Adult population", positive=True),
        ),
        raw=_share("engaged_adults", "adult_population"),
        shape="linear",
        params={"min": 0, "max": 100},
        checks=(_not_above("engaged_adults", "adult_population"),),
    ),
    # Urban Governance and Legislation / Municipal Financing and Institutional Capacity
    IndicatorDefinition(
        key="own_revenue_collection",
        name="Own Revenue Collection",
        unit="%",
        inputs=(
            _num("own_source_revenue", "Own-source revenue"),
            _num("total_local_revenue", "Total local revenue", positive=True),
        ),
        raw=_share("own_source_revenue", "total_local_revenue"),
        shape="linear",
        params={"min": 17, "max": 80},
        checks=(_not_above("own_source_revenue", "total_local_revenue"),),
    ),
    IndicatorDefinition(
        key="subnational_debt",
        name="Subnational Debt",
        unit="% of revenue",
        inputs=(
            _num("total_debt", "Total local government debt", positive=True),
            _num("total_revenue", "Total local government revenue", positive=True),
        ),
        raw=_share("total_debt", "total_revenue"),
        shape="deviation",
        params={"target": 60, "penalize": "above"},
    ),
    IndicatorDefinition(
        key="local_expenditure_efficiency",
        name="Local Expenditure Efficiency",
        unit="%",
        inputs=(
            _num("real_expenditure", "Real expenditure", positive=True),
            _num("estimated_expenditure", "Budgeted expenditure", positive=True),
        ),
        raw=_share("real_expenditure", "estimated_expenditure"),
        shape="deviation",
        params={"target": 100},
    ),
    # Urban Governance and Legislation / Governance of Urbanization
    IndicatorDefinition(
        key="land_use_efficiency",
        name="Land Use Efficiency",
        unit="ratio",
        inputs=(
            _num("urban_area_start", "Urbanized area at the start year", positive=True),
            _num("urban_area_end", "Urbanized area at the end year", positive=True),
            _num("population_start", "Population at the start year", positive=True),
            _num("population_end", "Population at the end year", positive=True),
            _num("years", "Years between measurements", positive=True),
        ),
        raw=_land_use_efficiency,
        shape="inverse_linear",
        params={"min": 0, "max": 3},
        checks=(
            _growth_positive("urban_area_end", "urban_area_start"),
            _growth_positive("population_end", "population_start"),
        ),
    ),
)

INDICATORS: Dict[str, IndicatorDefinition] = {d.key: d for d in _DEFINITIONS}


def get_indicator(key: str) -> IndicatorDefinition:
    """Look up an indicator definition by key."""
    try:
        return INDICATORS[key]
    except KeyError:
        raise UnknownIndicatorError(key) from None
