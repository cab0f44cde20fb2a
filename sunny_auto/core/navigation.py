from typing import Dict

from sunny_auto.core.config import settings

# Named client-side routes of the web front end
CUSTOMER_ROUTES: Dict[str, str] = {
    "home": "/UserHome",
    "welcome": "/Welcome",
    "services": "/Services",
    "about": "/About",
    "contact": "/Contactus",
    "appointment": "/Appointment",
    "payment": "/Payment",
    "terms": "/Tearmscondition",
    "signin": "/signin",
    "signup": "/signup",
    "profile": "/UserProfile",
    "profile_settings": "/UserProfSettings",
}

ADMIN_ROUTES: Dict[str, str] = {
    "home": "/AdminHome",
    "appointments": "/AdminAppointment",
    "customers": "/AC",
    "finances": "/AdminFinances",
    "reports": "/AdminReports",
    "services": "/AdminServices",
    "notifications": "/AdminNotification",
    "profile": "/Adminprofile",
}


def home_route() -> str:
    return settings.HOME_ROUTE or CUSTOMER_ROUTES["home"]


def route_table() -> Dict[str, Dict[str, str]]:
    return {"customer": dict(CUSTOMER_ROUTES), "admin": dict(ADMIN_ROUTES)}
