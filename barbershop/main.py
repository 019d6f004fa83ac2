import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from barbershop.core import config
from barbershop.database import ensure_schema
from barbershop.routes import (
    appointment_routes,
    auth_routes,
    availability_routes,
    blocked_time_routes,
    client_routes,
    service_routes,
    settings_routes,
    user_routes,
)

logging.basicConfig(
    level=config.LOG_LEVEL,
    format='%(asctime)s %(levelname)s %(name)s: %(message)s',
)

logger = logging.getLogger(__name__)

app = FastAPI(title='Barbershop Booking API')

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=['*'],
    allow_headers=['*'],
)


@app.on_event('startup')
def initialize_database() -> None:
    config.validate_runtime_config()
    try:
        ensure_schema()
    except SQLAlchemyError:
        logger.exception('Database initialization failed. Check DATABASE_URL and database credentials.')


@app.get('/')
def root():
    return {'status': 'Barbershop Booking API Running'}


app.include_router(auth_routes.router, prefix='/auth')
app.include_router(availability_routes.router, prefix='/availability')
app.include_router(appointment_routes.router, prefix='/appointments')
app.include_router(blocked_time_routes.router, prefix='/blocked-times')
app.include_router(settings_routes.router, prefix='/settings')
app.include_router(service_routes.router, prefix='/services')
app.include_router(client_routes.router, prefix='/clients')
app.include_router(user_routes.router, prefix='/users')
