from fastapi import APIRouter
from app.api.v1.routes.auth import router as auth_router
from app.api.v1.routes.flights import router as flights_router
from app.api.v1.routes.bookings import router as bookings_router
from app.api.v1.routes.tickets import router as tickets_router
from app.api.v1.routes.transactions import router as transactions_router
from app.api.v1.routes.employee import router as employee_router

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(auth_router)
api_router.include_router(flights_router)
api_router.include_router(bookings_router)
api_router.include_router(tickets_router)
api_router.include_router(transactions_router)
api_router.include_router(employee_router)
