"""Survey records: sites, the six survey variants and their field catalogue.

Stored payloads come from the field forms and mix ``camelCase`` and
``snake_case`` keys, keep numbers as strings and use empty strings for unset
values. ``SurveyModel`` normalises all of that on the way in, so every variant
below works with snake_case attributes and ``None`` for "not provided".
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, ClassVar, Dict, List, Optional, Tuple, Type, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from fieldsheets.derivation import DERIVED_FIELDS, recompute

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])([A-Z])")


class SurveyType(str, Enum):
    SOIL = "soil"
    GROUNDWATER = "groundwater"
    GAS = "gas"
    AMBIENT_AIR = "ambient_air"
    SURFACE_WATER = "surface_water"
    PID = "pid"


class SiteStatus(str, Enum):
    ACTIVE = "active"
    ARCHIVED = "archived"


SURVEY_TYPE_LABELS: Dict[SurveyType, str] = {
    SurveyType.SOIL: "Sol",
    SurveyType.GROUNDWATER: "Eaux souterraines",
    SurveyType.GAS: "Gaz du sol",
    SurveyType.AMBIENT_AIR: "Air ambiant",
    SurveyType.SURFACE_WATER: "Eaux superficielles",
    SurveyType.PID: "Campagne PID",
}

# Closed choices: (stored value, printed label)
WEATHER_CHOICES = (
    ("sunny", "Ensoleillé"),
    ("cloudy", "Nuageux"),
    ("windy", "Venteux"),
    ("rainy", "Pluvieux"),
)
LABORATORY_CHOICES = (("wessling", "Wessling"), ("agrolab", "Agrolab"))
DRILLING_TOOL_CHOICES = tuple(
    (label, label)
    for label in (
        "Carottier portatif",
        "Carottier manuel",
        "Tarière mécanique",
        "Tarière manuelle",
        "Pelle mécanique",
        "Géoprobe",
    )
)
REFECTION_CHOICES = tuple((label, label) for label in ("Cuttings", "Béton", "Enrobé", "Autres"))
CUTTINGS_CHOICES = tuple(
    (label, label) for label in ("Remis en place", "Évacués", "Stockés sur site", "Big-bag")
)
STRUCTURE_CHOICES = (("temporary", "Temporaire"), ("permanent", "Permanent"))
PURGE_TYPE_CHOICES = (("static", "Statique"), ("dynamic", "Dynamique"))
GAS_SAMPLING_CHOICES = (
    ("actif-pompe", "Actif avec pompe"),
    ("actif-naturel", "Actif naturel"),
    ("passif", "Passif"),
)
AIR_SAMPLING_CHOICES = (
    ("active-pump", "Actif avec pompe"),
    ("active-natural", "Actif naturel"),
    ("passive", "Passif"),
)
SUPPORT_CHOICES = (
    ("xad2", "XAD-2"),
    ("charbon-actif", "Charbon actif"),
    ("hopkalite", "Hopkalite"),
    ("fluorisil", "Fluorisil"),
    ("autre", "Autre"),
)
SURFACE_SAMPLING_CHOICES = (
    ("shore", "De la rive"),
    ("upstream", "En amont du site"),
    ("downstream", "En aval du site"),
    ("other", "Autre"),
)
SURFACE_EQUIPMENT_CHOICES = (
    ("bucket", "Seau"),
    ("sampling-rod", "Canne de prélèvement"),
    ("pump", "Pompe"),
)
WATER_TYPE_CHOICES = (
    ("river", "Fleuve"),
    ("stream", "Rivière"),
    ("brook", "Ruisseau"),
    ("lake", "Lac"),
    ("pond", "Étang"),
)
ESTIMATED_FLOW_CHOICES = (("stagnant", "Stagnant"), ("low", "Faible"), ("high", "Fort"))
FLOW_TYPE_CHOICES = (
    ("laminar", "Laminaire"),
    ("intermediate", "Intermédiaire"),
    ("turbulent", "Turbulent"),
)
TURBIDITY_CHOICES = (("low", "Faible"), ("medium", "Moyenne"), ("high", "Forte"))


def snake_case(key: str) -> str:
    return _CAMEL_BOUNDARY.sub(r"_\1", key).lower()


def _clean_payload(data: Any) -> Any:
    if not isinstance(data, dict):
        return data
    cleaned: Dict[str, Any] = {}
    for key, value in data.items():
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        cleaned[snake_case(key) if isinstance(key, str) else key] = value
    return cleaned


class SurveyModel(BaseModel):
    """Base for every payload group; tolerant of the stored form shapes."""

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    @model_validator(mode="before")
    @classmethod
    def _normalise_keys(cls, data: Any) -> Any:
        return _clean_payload(data)


# ---------------------------------------------------------------------------
# Shared groups
# ---------------------------------------------------------------------------


class Coordinates(SurveyModel):
    """Projected X/Y/Z or longitude/latitude/altitude, stored either way."""

    x: Optional[str] = None
    y: Optional[str] = None
    z: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _normalise_keys(cls, data: Any) -> Any:
        data = _clean_payload(data)
        if isinstance(data, dict):
            for geo_key, axis in (("longitude", "x"), ("latitude", "y"), ("altitude", "z")):
                if geo_key in data and axis not in data:
                    data[axis] = data.pop(geo_key)
        return data


class IndoorLocation(SurveyModel):
    room: Optional[str] = None
    position: Optional[str] = None
    coordinates: Optional[Coordinates] = None


class Triplet(SurveyModel):
    """Value read at the start, middle and end of a sampling window."""

    start: Optional[str] = None
    intermediate: Optional[str] = None
    end: Optional[str] = None

    def is_blank(self) -> bool:
        return self.start is None and self.intermediate is None and self.end is None


class SampleManagement(SurveyModel):
    conditioning: Optional[str] = None
    transporter: Optional[str] = None
    laboratory: Optional[str] = None
    shipping_date: Optional[str] = None


class WeatherConditions(SurveyModel):
    description: Optional[str] = None
    external_temp: Optional[str] = None
    internal_temp: Optional[str] = None
    pressure: Optional[str] = None
    humidity: Optional[str] = None
    wind_speed_direction: Optional[str] = None


class GasReadings(SurveyModel):
    pid: Optional[str] = None
    o2: Optional[str] = None
    h2s: Optional[str] = None
    ch4: Optional[str] = None
    co: Optional[str] = None


class FlowControl(SurveyModel):
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    duration: Optional[str] = None
    flow_rates: Triplet = Field(default_factory=Triplet)
    average_flow: Optional[str] = None
    total_volume: Optional[str] = None


class Laboratory(SurveyModel):
    name: Optional[str] = None
    packaging: Optional[str] = None
    transporter: Optional[str] = None
    delivery_date: Optional[str] = None
    substances_to_analyze: Optional[str] = None


class CommonData(SurveyModel):
    date: Optional[str] = None
    time: Optional[str] = None
    weather_conditions: Optional[str] = None
    coordinates: Optional[Coordinates] = None
    sampling_name: Optional[str] = None
    field_team: List[str] = Field(default_factory=list)
    equipment_used: List[str] = Field(default_factory=list)
    location: Optional[IndoorLocation] = None


# ---------------------------------------------------------------------------
# Soil
# ---------------------------------------------------------------------------


class DrillingInfo(SurveyModel):
    tool: Optional[str] = None
    diameter: Optional[str] = None
    depth: Optional[str] = None
    refection: Optional[str] = None
    cuttings_management: Optional[str] = None
    remarks: Optional[str] = None


class SoilObservation(SurveyModel):
    depth: Optional[str] = None
    lithology: Optional[str] = None
    water: Optional[str] = None
    organoleptic: Optional[str] = None
    pid: Optional[str] = None
    samples: Optional[str] = None
    photos: List[str] = Field(default_factory=list)


class SoilData(SurveyModel):
    survey_type: ClassVar[SurveyType] = SurveyType.SOIL

    name: Optional[str] = None
    coordinates: Coordinates = Field(default_factory=Coordinates)
    main_photos: List[str] = Field(default_factory=list)
    drilling_info: DrillingInfo = Field(default_factory=DrillingInfo)
    observations: List[SoilObservation] = Field(default_factory=list)
    sample_management: SampleManagement = Field(default_factory=SampleManagement)


# ---------------------------------------------------------------------------
# Groundwater
# ---------------------------------------------------------------------------


class GroundwaterGeneralInfo(SurveyModel):
    date: Optional[str] = None
    time: Optional[str] = None
    air_temp: Optional[str] = None
    weather: Optional[str] = None
    well_type: Optional[str] = None
    usage: Optional[str] = None
    has_protective_cover: Optional[bool] = None
    has_curb: Optional[bool] = None
    has_tubing: Optional[bool] = None
    has_sealing: Optional[bool] = None


class WellCharacteristics(SurveyModel):
    inner_diameter: Optional[str] = None
    outer_diameter: Optional[str] = None
    cover_height: Optional[str] = None
    total_depth: Optional[str] = None
    screen_height: Optional[str] = None
    water_level: Optional[str] = None
    water_column_height: Optional[float] = None
    total_water_volume: Optional[float] = None
    three_volumes: Optional[float] = None
    purging_rate: Optional[str] = None
    pumping_time: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _normalise_keys(cls, data: Any) -> Any:
        data = _clean_payload(data)
        if isinstance(data, dict):
            # derived values are only ever produced by recompute()
            for name in DERIVED_FIELDS:
                data.pop(name, None)
        return data


class PurgeTreatment(SurveyModel):
    activated_carbon: Optional[bool] = None
    other: Optional[str] = None


class GroundwaterPurge(SurveyModel):
    equipment: Optional[str] = None
    materials: Optional[str] = None
    type: Optional[str] = None
    start_rate: Optional[str] = None
    end_rate: Optional[str] = None
    pump_position: Optional[str] = None
    drawdown: Optional[str] = None
    treatment: PurgeTreatment = Field(default_factory=PurgeTreatment)
    purge_volume: Optional[str] = None


class GroundwaterSampling(SurveyModel):
    equipment: Optional[str] = None
    start_date: Optional[str] = None
    duration: Optional[str] = None
    purge_level: Optional[str] = None
    pumping_rate: Optional[str] = None
    pump_position: Optional[str] = None
    equipment_cleaned: Optional[bool] = None


class GroundwaterParameters(SurveyModel):
    time: Triplet = Field(default_factory=Triplet)
    water_level: Triplet = Field(default_factory=Triplet)
    turbidity: Triplet = Field(default_factory=Triplet)
    conductivity: Triplet = Field(default_factory=Triplet)
    ph: Triplet = Field(default_factory=Triplet)
    dissolved_oxygen: Triplet = Field(default_factory=Triplet)
    temperature: Triplet = Field(default_factory=Triplet)
    remarks: Triplet = Field(default_factory=Triplet)
    pid: Triplet = Field(default_factory=Triplet)


class GroundwaterData(SurveyModel):
    survey_type: ClassVar[SurveyType] = SurveyType.GROUNDWATER

    name: Optional[str] = None
    location: Coordinates = Field(default_factory=Coordinates)
    general_info: GroundwaterGeneralInfo = Field(default_factory=GroundwaterGeneralInfo)
    pid_measurement: Optional[str] = None
    floating_thickness: Optional[str] = None
    well_characteristics: WellCharacteristics = Field(default_factory=WellCharacteristics)
    purge: GroundwaterPurge = Field(default_factory=GroundwaterPurge)
    sampling: GroundwaterSampling = Field(default_factory=GroundwaterSampling)
    parameters: GroundwaterParameters = Field(default_factory=GroundwaterParameters)
    sample_management: SampleManagement = Field(default_factory=SampleManagement)
    photos: List[str] = Field(default_factory=list)

    @field_validator("well_characteristics", mode="after")
    @classmethod
    def _derive_well_values(cls, value: WellCharacteristics) -> WellCharacteristics:
        return recompute(value)


# ---------------------------------------------------------------------------
# Soil gas
# ---------------------------------------------------------------------------


class GasSampleDescription(SurveyModel):
    structure_type: Optional[str] = None
    details: Optional[str] = None
    name: Optional[str] = None


class GasSampling(SurveyModel):
    type: Optional[str] = None
    support_count: Optional[str] = None
    support_type: Optional[str] = None
    depth: Optional[str] = None
    seal_type: Optional[str] = None
    soil_description: Optional[str] = None


class GasPurge(SurveyModel):
    details: Optional[str] = None
    measurements: GasReadings = Field(default_factory=GasReadings)
    flow: FlowControl = Field(default_factory=FlowControl)


class GasData(SurveyModel):
    survey_type: ClassVar[SurveyType] = SurveyType.GAS

    name: Optional[str] = None
    sample_description: GasSampleDescription = Field(default_factory=GasSampleDescription)
    weather_conditions: WeatherConditions = Field(default_factory=WeatherConditions)
    sampling: GasSampling = Field(default_factory=GasSampling)
    purge: GasPurge = Field(default_factory=GasPurge)
    laboratory: Laboratory = Field(default_factory=Laboratory)


# ---------------------------------------------------------------------------
# Ambient air
# ---------------------------------------------------------------------------


class AirSampling(SurveyModel):
    type: Optional[str] = None
    support_count: Optional[str] = None
    support_type: Optional[str] = None
    installation_description: Optional[str] = None
    height: Optional[str] = None
    ventilation: Optional[bool] = None
    recent_work: Optional[str] = None
    heating: Optional[str] = None
    interfering_sources: Optional[str] = None
    interfering_activities: Optional[str] = None


class AmbientAirData(SurveyModel):
    survey_type: ClassVar[SurveyType] = SurveyType.AMBIENT_AIR

    name: Optional[str] = None
    weather_conditions: WeatherConditions = Field(default_factory=WeatherConditions)
    sampling: AirSampling = Field(default_factory=AirSampling)
    measurements: GasReadings = Field(default_factory=GasReadings)
    flow: FlowControl = Field(default_factory=FlowControl)
    laboratory: Laboratory = Field(default_factory=Laboratory)


# ---------------------------------------------------------------------------
# Surface water
# ---------------------------------------------------------------------------


class SurfaceWaterGeneralInfo(SurveyModel):
    date: Optional[str] = None
    time: Optional[str] = None
    air_temperature: Optional[str] = None
    weather_condition: Optional[str] = None


class SurfaceWaterSampling(SurveyModel):
    type: Optional[str] = None
    equipment: Optional[str] = None
    depth: Optional[str] = None


class StationDescription(SurveyModel):
    description: Optional[str] = None
    water_type: Optional[str] = None
    estimated_flow: Optional[str] = None
    flow_type: Optional[str] = None
    observations: Optional[str] = None


class FieldObservations(SurveyModel):
    turbidity: Optional[str] = None
    water_color: Optional[str] = None
    has_leaves_moss: Optional[bool] = None
    has_floating: Optional[bool] = None
    water_odor: Optional[str] = None
    has_shade: Optional[bool] = None


class SurfaceWaterParameters(SurveyModel):
    time: Triplet = Field(default_factory=Triplet)
    temperature: Triplet = Field(default_factory=Triplet)
    conductivity: Triplet = Field(default_factory=Triplet)
    ph: Triplet = Field(default_factory=Triplet)
    redox: Triplet = Field(default_factory=Triplet)
    remarks: Triplet = Field(default_factory=Triplet)


class SurfaceWaterData(SurveyModel):
    survey_type: ClassVar[SurveyType] = SurveyType.SURFACE_WATER

    name: Optional[str] = None
    general_info: SurfaceWaterGeneralInfo = Field(default_factory=SurfaceWaterGeneralInfo)
    location: Coordinates = Field(default_factory=Coordinates)
    sampling: SurfaceWaterSampling = Field(default_factory=SurfaceWaterSampling)
    station_description: StationDescription = Field(default_factory=StationDescription)
    field_observations: FieldObservations = Field(default_factory=FieldObservations)
    parameters: SurfaceWaterParameters = Field(default_factory=SurfaceWaterParameters)
    sample_management: SampleManagement = Field(default_factory=SampleManagement)
    photos: List[str] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# PID sweep
# ---------------------------------------------------------------------------


class StructureDescription(SurveyModel):
    type: Optional[str] = None
    details: Optional[str] = None


class PidMeasurement(GasReadings):
    location: Optional[str] = None


class PidData(SurveyModel):
    survey_type: ClassVar[SurveyType] = SurveyType.PID

    structure_description: StructureDescription = Field(default_factory=StructureDescription)
    weather_conditions: WeatherConditions = Field(default_factory=WeatherConditions)
    measurements: List[PidMeasurement] = Field(default_factory=list)


SpecificData = Union[SoilData, GroundwaterData, GasData, AmbientAirData, SurfaceWaterData, PidData]

SPECIFIC_DATA_MODELS: Dict[SurveyType, Type[SurveyModel]] = {
    model.survey_type: model
    for model in (SoilData, GroundwaterData, GasData, AmbientAirData, SurfaceWaterData, PidData)
}


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------


class GeoPoint(BaseModel):
    latitude: float
    longitude: float

    model_config = ConfigDict(frozen=True)


class Site(BaseModel):
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    id: str
    name: Optional[str] = None
    location: Optional[str] = None
    city: Optional[str] = None
    project_number: Optional[str] = None
    project_manager: Optional[str] = None
    engineer_in_charge: Optional[str] = None
    drilling_company: Optional[str] = None
    description: Optional[str] = None
    visit_date: Optional[str] = None
    coordinates: Optional[GeoPoint] = None
    status: SiteStatus = SiteStatus.ACTIVE
    created_at: Optional[datetime] = None
    user_id: Optional[str] = None


class Survey(BaseModel):
    """A survey record. ``type`` is fixed at creation; ``edit`` only swaps data."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: str
    site_id: str
    type: SurveyType
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    created_by: Optional[str] = None
    common_data: CommonData = Field(default_factory=CommonData)
    specific_data: SpecificData

    @model_validator(mode="before")
    @classmethod
    def _parse_specific_data(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        try:
            survey_type = SurveyType(data.get("type"))
        except ValueError:
            return data
        data = dict(data)
        if data.get("common_data") is None:
            data.pop("common_data", None)
        specific = data.get("specific_data")
        if specific is None:
            specific = {}
        if isinstance(specific, dict):
            data["specific_data"] = SPECIFIC_DATA_MODELS[survey_type].model_validate(specific)
        return data

    @model_validator(mode="after")
    def _check_variant(self) -> "Survey":
        expected = SPECIFIC_DATA_MODELS[self.type]
        if type(self.specific_data) is not expected:
            raise ValueError(
                f"specific_data of a {self.type.value} survey must be {expected.__name__}, "
                f"got {type(self.specific_data).__name__}"
            )
        return self

    def edit(
        self,
        *,
        common_data: Union[CommonData, Dict[str, Any], None] = None,
        specific_data: Union[SpecificData, Dict[str, Any], None] = None,
        updated_at: Optional[datetime] = None,
    ) -> "Survey":
        payload = {
            "id": self.id,
            "site_id": self.site_id,
            "type": self.type,
            "created_at": self.created_at,
            "updated_at": updated_at or self.updated_at,
            "created_by": self.created_by,
            "common_data": self.common_data if common_data is None else common_data,
            "specific_data": self.specific_data if specific_data is None else specific_data,
        }
        return Survey.model_validate(payload)


# ---------------------------------------------------------------------------
# Field catalogue
# ---------------------------------------------------------------------------


class FieldKind(str, Enum):
    SHORT_TEXT = "short_text"
    LONG_TEXT = "long_text"
    NUMBER = "number"
    DATE = "date"
    TIME = "time"
    BOOLEAN = "boolean"
    CHOICE = "choice"
    GROUP = "group"
    REPEATABLE = "repeatable"


@dataclass(frozen=True)
class FieldSpec:
    name: str
    label: str
    kind: FieldKind
    unit: Optional[str] = None
    choices: Tuple[Tuple[str, str], ...] = ()
    children: Tuple["FieldSpec", ...] = ()
    derived: bool = False

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"name": self.name, "label": self.label, "kind": self.kind.value}
        if self.unit:
            data["unit"] = self.unit
        if self.choices:
            data["choices"] = [{"value": value, "label": label} for value, label in self.choices]
        if self.children:
            data["children"] = [child.to_dict() for child in self.children]
        if self.derived:
            data["derived"] = True
        return data


def _text(name: str, label: str) -> FieldSpec:
    return FieldSpec(name, label, FieldKind.SHORT_TEXT)


def _long(name: str, label: str) -> FieldSpec:
    return FieldSpec(name, label, FieldKind.LONG_TEXT)


def _num(name: str, label: str, unit: Optional[str] = None, derived: bool = False) -> FieldSpec:
    return FieldSpec(name, label, FieldKind.NUMBER, unit=unit, derived=derived)


def _date(name: str, label: str) -> FieldSpec:
    return FieldSpec(name, label, FieldKind.DATE)


def _time(name: str, label: str) -> FieldSpec:
    return FieldSpec(name, label, FieldKind.TIME)


def _bool(name: str, label: str) -> FieldSpec:
    return FieldSpec(name, label, FieldKind.BOOLEAN)


def _choice(name: str, label: str, choices: Tuple[Tuple[str, str], ...]) -> FieldSpec:
    return FieldSpec(name, label, FieldKind.CHOICE, choices=choices)


def _group(name: str, label: str, *children: FieldSpec) -> FieldSpec:
    return FieldSpec(name, label, FieldKind.GROUP, children=children)


def _repeat(name: str, label: str, *children: FieldSpec) -> FieldSpec:
    return FieldSpec(name, label, FieldKind.REPEATABLE, children=children)


def _triplet(name: str, label: str, unit: Optional[str] = None, kind: FieldKind = FieldKind.NUMBER) -> FieldSpec:
    return _group(
        name,
        label,
        FieldSpec("start", "Début", kind, unit=unit),
        FieldSpec("intermediate", "Intermédiaire", kind, unit=unit),
        FieldSpec("end", "Fin", kind, unit=unit),
    )


_XYZ = _group("coordinates", "Localisation", _text("x", "X"), _text("y", "Y"), _text("z", "Z sol"))

_SAMPLE_MANAGEMENT = _group(
    "sample_management",
    "Gestion des échantillons",
    _text("conditioning", "Conditionnement/T°C"),
    _text("transporter", "Transporteur"),
    _choice("laboratory", "Laboratoire", LABORATORY_CHOICES),
    _date("shipping_date", "Date d'envoi au laboratoire"),
)

_WEATHER_CONDITIONS = _group(
    "weather_conditions",
    "Conditions météorologiques",
    _text("description", "Description"),
    _num("external_temp", "T°C ext", "°C"),
    _num("internal_temp", "T°C int", "°C"),
    _num("pressure", "Pression", "Pa"),
    _num("humidity", "Taux d'humidité dans l'air", "%"),
    _text("wind_speed_direction", "Vitesse et sens du vent"),
)


def _gas_readings(name: str, label: str) -> FieldSpec:
    return _group(
        name,
        label,
        _num("pid", "PID", "ppmV"),
        _num("o2", "O2", "%"),
        _num("h2s", "H2S", "ppmV"),
        _num("ch4", "CH4", "%"),
        _num("co", "CO", "ppmV"),
    )


_FLOW_CONTROL = _group(
    "flow",
    "Contrôle de débit",
    _time("start_time", "Heure début"),
    _time("end_time", "Heure fin"),
    _num("duration", "Durée prélèvement", "min"),
    _triplet("flow_rates", "Débit", "l/min"),
    _num("average_flow", "Débit moyen retenu", "l/min"),
    _num("total_volume", "Volume total prélevé", "l"),
)

_LABORATORY = _group(
    "laboratory",
    "Conditionnement et transport",
    _text("name", "Laboratoire de destination"),
    _text("packaging", "Type de conditionnement"),
    _text("transporter", "Transporteur"),
    _text("delivery_date", "Date et heure de remise au transporteur"),
    _long("substances_to_analyze", "Substances recherchées"),
)

_PHOTOS = _repeat("photos", "Photos", _text("ref", "Référence de stockage"))

FIELD_CATALOGUE: Dict[SurveyType, Tuple[FieldSpec, ...]] = {
    SurveyType.SOIL: (
        _text("name", "Nom du sondage"),
        _XYZ,
        _repeat("main_photos", "Photos du sondage", _text("ref", "Référence de stockage")),
        _group(
            "drilling_info",
            "Informations sur le sondage",
            _choice("tool", "Outil de sondage", DRILLING_TOOL_CHOICES),
            _num("diameter", "Diamètre sondage", "mm"),
            _num("depth", "Profondeur atteinte", "m"),
            _choice("refection", "Rebouchage et réfection", REFECTION_CHOICES),
            _choice("cuttings_management", "Gestion des déblais", CUTTINGS_CHOICES),
            _long("remarks", "Remarques / Revêtement"),
        ),
        _repeat(
            "observations",
            "Observations",
            _num("depth", "Profondeur", "m"),
            _long("lithology", "Description lithologique"),
            _text("water", "Eau"),
            _text("organoleptic", "Organoleptiques"),
            _num("pid", "PID", "ppm"),
            _text("samples", "Échantillons"),
            _repeat("photos", "Photos", _text("ref", "Référence de stockage")),
        ),
        _SAMPLE_MANAGEMENT,
    ),
    SurveyType.GROUNDWATER: (
        _text("name", "Nom de l'ouvrage"),
        _group("location", "Localisation du piézomètre", _text("x", "X"), _text("y", "Y"), _text("z", "Z")),
        _group(
            "general_info",
            "Informations générales",
            _date("date", "Date"),
            _time("time", "Heure"),
            _num("air_temp", "T° air", "°C"),
            _choice("weather", "Condition météo", WEATHER_CHOICES),
            _text("well_type", "Type d'ouvrage"),
            _text("usage", "Usage"),
            _bool("has_protective_cover", "Capot protection"),
            _bool("has_curb", "Margelle"),
            _bool("has_tubing", "Tubage"),
            _bool("has_sealing", "Colmatage"),
        ),
        _num("pid_measurement", "PID à l'ouverture", "ppm"),
        _num("floating_thickness", "Flottant (épaisseur)", "cm"),
        _group(
            "well_characteristics",
            "Caractéristiques de l'ouvrage",
            _num("inner_diameter", "Diamètre intérieur", "mm"),
            _num("outer_diameter", "Diamètre extérieur", "mm"),
            _num("cover_height", "Hauteur capot", "m/sol TN"),
            _num("total_depth", "Profondeur totale", "m/sol TN"),
            _num("screen_height", "Hauteur crépine", "m"),
            _num("water_level", "Niveau piézométrique", "m/sol TN"),
            _num("water_column_height", "Hauteur colonne d'eau", "m", derived=True),
            _num("total_water_volume", "Volume total d'eau", "L", derived=True),
            _num("three_volumes", "3 volumes", "L", derived=True),
            _num("purging_rate", "Débit de purge prévu", "l/min"),
            _num("pumping_time", "Temps de pompage", "min"),
        ),
        _group(
            "purge",
            "Purge",
            _text("equipment", "Matériel utilisé"),
            _text("materials", "Matériaux (tuyaux)"),
            _choice("type", "Type de purge", PURGE_TYPE_CHOICES),
            _num("start_rate", "Débit début purge", "l/min"),
            _num("end_rate", "Fin purge", "l/min"),
            _num("pump_position", "Position pompe/sol TN", "m"),
            _num("drawdown", "Rabattement de l'eau", "m"),
            _group(
                "treatment",
                "Traitement eau purge",
                _bool("activated_carbon", "Charbon actif"),
                _text("other", "Autre"),
            ),
            _num("purge_volume", "Volume rejet purge", "L"),
        ),
        _group(
            "sampling",
            "Prélèvement - Échantillonnage",
            _text("equipment", "Matériel utilisé"),
            _text("start_date", "Date et heure de début de pompage"),
            _num("duration", "Durée de pompage", "min"),
            _num("purge_level", "Niveau de purge atteint", "L"),
            _num("pumping_rate", "Débit de pompage", "l/min"),
            _num("pump_position", "Position de la pompe", "m/repère"),
            _bool("equipment_cleaned", "Nettoyage du matériel"),
        ),
        _group(
            "parameters",
            "Paramètres à contrôler",
            _triplet("time", "Heure", kind=FieldKind.TIME),
            _triplet("water_level", "Niveau d'eau", "m"),
            _triplet("turbidity", "Turbidité", "NTU"),
            _triplet("conductivity", "Conductivité", "µS/cm"),
            _triplet("ph", "pH"),
            _triplet("dissolved_oxygen", "Oxygène dissous", "mg/l"),
            _triplet("temperature", "Température", "°C"),
            _triplet("remarks", "Remarques", kind=FieldKind.SHORT_TEXT),
            _triplet("pid", "Valeur PID", "ppm"),
        ),
        _SAMPLE_MANAGEMENT,
        _PHOTOS,
    ),
    SurveyType.GAS: (
        _group(
            "sample_description",
            "Description de l'ouvrage",
            _text("name", "Nom de l'ouvrage"),
            _choice("structure_type", "Ouvrage temporaire ou permanent", STRUCTURE_CHOICES),
            _long("details", "Description"),
        ),
        _WEATHER_CONDITIONS,
        _group(
            "sampling",
            "Description du prélèvement",
            _choice("type", "Type d'échantillonnage", GAS_SAMPLING_CHOICES),
            _num("support_count", "Nombre de support"),
            _choice("support_type", "Nature des supports", SUPPORT_CHOICES),
            _num("depth", "Profondeur de l'ouvrage", "m"),
            _text("seal_type", "Type d'étanchéité"),
            _long("soil_description", "Description des sols"),
        ),
        _group(
            "purge",
            "Purge de l'ouvrage",
            _long("details", "Détail de la purge"),
            _gas_readings("measurements", "Mesures semi-quantitatives"),
            _FLOW_CONTROL,
        ),
        _LABORATORY,
    ),
    SurveyType.AMBIENT_AIR: (
        _WEATHER_CONDITIONS,
        _group(
            "sampling",
            "Description du prélèvement",
            _choice("type", "Type d'échantillonnage", AIR_SAMPLING_CHOICES),
            _num("support_count", "Nombre de support"),
            _choice("support_type", "Nature des supports", SUPPORT_CHOICES),
            _long("installation_description", "Description de l'installation"),
            _num("height", "Hauteur de l'ouvrage", "m"),
            _bool("ventilation", "Présence d'aération / Ventilation"),
            _text("recent_work", "Travaux récents"),
            _text("heating", "Chauffage"),
            _text("interfering_sources", "Présence de sources d'interférences"),
            _text("interfering_activities", "Activités susceptibles d'interférer"),
        ),
        _gas_readings("measurements", "Mesures semi-quantitatives avant prélèvement"),
        _FLOW_CONTROL,
        _LABORATORY,
    ),
    SurveyType.SURFACE_WATER: (
        _text("name", "Nom du prélèvement"),
        _group(
            "general_info",
            "Informations générales",
            _date("date", "Date"),
            _time("time", "Heure"),
            _num("air_temperature", "Température de l'air", "°C"),
            _choice("weather_condition", "Condition météo", WEATHER_CHOICES),
        ),
        _group("location", "Localisation du prélèvement", _text("x", "X"), _text("y", "Y"), _text("z", "Z")),
        _group(
            "sampling",
            "Condition de prélèvement - Échantillonnage",
            _choice("type", "Type de prélèvement", SURFACE_SAMPLING_CHOICES),
            _choice("equipment", "Matériel de prélèvement", SURFACE_EQUIPMENT_CHOICES),
            _num("depth", "Niveau ou profondeur de prélèvement", "m"),
        ),
        _group(
            "station_description",
            "Description de la station de prélèvement",
            _long("description", "Description du point d'échantillonnage"),
            _choice("water_type", "Type d'eau superficielle", WATER_TYPE_CHOICES),
            _choice("estimated_flow", "Débit estimé", ESTIMATED_FLOW_CHOICES),
            _choice("flow_type", "Type d'écoulement", FLOW_TYPE_CHOICES),
            _long("observations", "Observations"),
        ),
        _group(
            "field_observations",
            "Observation de terrain",
            _choice("turbidity", "Turbidité", TURBIDITY_CHOICES),
            _text("water_color", "Couleur de l'eau"),
            _bool("has_leaves_moss", "Présence de feuilles, mousses"),
            _bool("has_floating", "Présence de flottants"),
            _text("water_odor", "Odeur de l'eau"),
            _bool("has_shade", "Ombrage"),
        ),
        _group(
            "parameters",
            "Paramètres à contrôler",
            _triplet("time", "Heure", kind=FieldKind.TIME),
            _triplet("temperature", "Température", "°C"),
            _triplet("conductivity", "Conductivité", "µS/cm"),
            _triplet("ph", "pH"),
            _triplet("redox", "Redox", "mV"),
            _triplet("remarks", "Remarques", kind=FieldKind.SHORT_TEXT),
        ),
        _SAMPLE_MANAGEMENT,
        _PHOTOS,
    ),
    SurveyType.PID: (
        _group(
            "structure_description",
            "Description de l'ouvrage",
            _choice("type", "Ouvrage temporaire ou permanent", STRUCTURE_CHOICES),
            _text("details", "Type d'ouvrage"),
        ),
        _WEATHER_CONDITIONS,
        _repeat(
            "measurements",
            "Mesures semi-quantitatives des gaz du sol",
            _text("location", "Ouvrage/Maille"),
            _num("pid", "PID", "ppmV"),
            _num("o2", "O2", "%"),
            _num("h2s", "H2S", "ppmV"),
            _num("ch4", "CH4", "%"),
            _num("co", "CO", "ppmV"),
        ),
    ),
}


def fields_for(survey_type: Union[SurveyType, str]) -> List[FieldSpec]:
    """Named fields of a survey variant, in form order."""
    return list(FIELD_CATALOGUE[SurveyType(survey_type)])


__all__ = [
    "CommonData",
    "Coordinates",
    "FIELD_CATALOGUE",
    "FieldKind",
    "FieldSpec",
    "GeoPoint",
    "SPECIFIC_DATA_MODELS",
    "SURVEY_TYPE_LABELS",
    "Site",
    "SiteStatus",
    "Survey",
    "SurveyType",
    "Triplet",
    "WellCharacteristics",
    "fields_for",
]
