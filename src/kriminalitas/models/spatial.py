"""Spatial models for administrative area boundaries."""

from geoalchemy2 import Geometry
from sqlalchemy import Column, Float, Integer, String, Text

from .base import Base, TimestampMixin


class Area(Base, TimestampMixin):
    """District (kecamatan) boundary with census and choropleth fields."""

    __tablename__ = "areas"

    id = Column(Integer, primary_key=True, autoincrement=False)
    name = Column(String(150), index=True)

    # Administrative metadata carried over from the source GeoJSON
    metadata_source = Column(Text)
    srs_id = Column(String(50))
    province = Column(String(100))  # WADMPR
    regency = Column(String(100))  # WADMKK
    district = Column(String(100))  # WADMKC
    village = Column(String(100))  # WADMKD
    uupp = Column(String(100))

    # Census figures
    population_total = Column(Integer, default=0, nullable=False)
    population_male = Column(Integer, default=0, nullable=False)
    population_female = Column(Integer, default=0, nullable=False)
    population_density = Column(Float, default=0, nullable=False)
    land_area = Column(Float, default=0, nullable=False)

    geom = Column(Geometry("GEOMETRY", srid=4326))

    # Precomputed display fields for the choropleth map
    crime_count = Column(Integer, default=0, nullable=False)
    crime_rate = Column(String(50))
    color = Column(String(16))
