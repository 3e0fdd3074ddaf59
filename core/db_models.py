"""
SQLAlchemy ORM models for the local device-style database.

Weather and tide rows double as the remote-data cache: each row carries the
epoch second it was written (``cache_timestamp``) so TTL checks never have to
touch the provider.
"""

from sqlalchemy import Column, Integer, String, Float, Boolean, Text, JSON, ForeignKey
from sqlalchemy.orm import declarative_base

Base = declarative_base()

class WeatherRecord(Base):
    __tablename__ = 'weather'

    record_id = Column(Integer, primary_key=True, autoincrement=True)
    weather_id = Column(String, nullable=False)
    location_id = Column(String, nullable=False, index=True)
    timestamp = Column(Float, nullable=False)  # epoch seconds
    utc_offset = Column(Integer, nullable=False, default=0)  # seconds east of UTC
    temperature = Column(Float, nullable=False)
    wind_speed = Column(Float, nullable=False)
    wind_direction = Column(String, nullable=False)
    precipitation = Column(Float, nullable=False, default=0.0)
    cloud_cover = Column(Integer, nullable=False)
    visibility = Column(Float, nullable=False)
    pressure = Column(Float, nullable=False)
    humidity = Column(Integer, nullable=False)
    uv_index = Column(Integer, nullable=False, default=0)
    water_temperature = Column(Float)
    is_forecast = Column(Boolean, nullable=False, default=False, index=True)
    cache_timestamp = Column(Float, nullable=False)

class TideRecord(Base):
    __tablename__ = 'tides'

    record_id = Column(Integer, primary_key=True, autoincrement=True)
    tide_id = Column(String, nullable=False)
    location_id = Column(String, nullable=False, index=True)
    timestamp = Column(Float, nullable=False)
    height = Column(Float, nullable=False)
    type = Column(String, nullable=False)
    next_high_time = Column(Float)
    next_high_height = Column(Float)
    next_low_time = Column(Float)
    next_low_height = Column(Float)
    is_forecast = Column(Boolean, nullable=False, default=False, index=True)
    cache_timestamp = Column(Float, nullable=False)

class LocationRecord(Base):
    __tablename__ = 'saved_locations'

    location_id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    notes = Column(Text)

class EquipmentRecord(Base):
    __tablename__ = 'equipment_items'

    equipment_id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    type = Column(String, nullable=False, index=True)
    image_url = Column(String)
    specifications = Column(JSON, nullable=False, default=dict)
    target_species = Column(JSON)
    water_clarity_conditions = Column(JSON)
    light_conditions = Column(JSON)
    weather_conditions = Column(JSON)
    tide_conditions = Column(JSON)
    position = Column(Integer, nullable=False, default=0)  # catalog order

class UserRecord(Base):
    __tablename__ = 'users'

    user_id = Column(String, primary_key=True)
    name = Column(String)
    email = Column(String, unique=True)
    password_hash = Column(String)
    password_salt = Column(String)
    is_anonymous = Column(Boolean, nullable=False, default=True)
    preferences = Column(JSON, nullable=False, default=dict)
    created_at = Column(Float, nullable=False)

class AuthTokenRecord(Base):
    __tablename__ = 'auth_tokens'

    token = Column(String, primary_key=True)
    user_id = Column(String, ForeignKey('users.user_id'), nullable=False, index=True)
    issued_at = Column(Float, nullable=False)

class UserEquipmentRecord(Base):
    __tablename__ = 'user_equipment'

    user_equipment_id = Column(String, primary_key=True)
    user_id = Column(String, ForeignKey('users.user_id'), nullable=False, index=True)
    equipment_id = Column(String, nullable=False)
    equipment_type = Column(String, nullable=False)
    name = Column(String, nullable=False, default="")
    color = Column(String)
    size = Column(String)
    brand = Column(String)
    is_favorite = Column(Boolean, nullable=False, default=False)
    notes = Column(Text)
    date_added = Column(Float, nullable=False)

class CatchRecord(Base):
    __tablename__ = 'catches'

    catch_id = Column(String, primary_key=True)
    user_id = Column(String, ForeignKey('users.user_id'), nullable=False, index=True)
    timestamp = Column(Float, nullable=False)
    location_id = Column(String, nullable=False)
    species = Column(String, nullable=False)
    size = Column(Float)  # inches
    weight = Column(Float)  # pounds
    equipment_used = Column(JSON, nullable=False, default=list)
    weather_conditions_id = Column(String)
    tide_conditions_id = Column(String)
    notes = Column(Text)
    photo_urls = Column(JSON, nullable=False, default=list)
