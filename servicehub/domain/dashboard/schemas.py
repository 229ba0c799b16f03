"""Dashboard schemas"""

from pydantic import BaseModel


class DashboardStats(BaseModel):
    totalVehicles: int = 0
    upcomingAppointments: int = 0
    ongoingProjects: int = 0
    completedAppointments: int = 0
    completedProjects: int = 0
    cancelledAppointments: int = 0
    totalAppointments: int = 0
    totalProjects: int = 0
