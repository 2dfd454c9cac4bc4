"""
Default screen documents written when a deployment is seeded.

Documents are returned in seeding order: splash first, since its presence is
what marks a deployment as seeded.
"""

import copy
from typing import Dict, List, Tuple

from ..schemas.screen_schemas import ScreenKey
from .base_repository import Document

_ASSET_BASE = (
    "https://firebasestorage.googleapis.com/v0/b/dev-fest-campeche-2024.appspot.com/o/demo-server-driven-ui%2F"
)

EMAIL_PATTERN = r"^[\w-\.]+@([\w-]+\.)+[\w-]{2,4}$"


def _asset(name: str) -> str:
    return f"{_ASSET_BASE}{name}?alt=media"


_SPLASH: Document = {
    "showImage": True,
    "imageURL": _asset("Logo-Lockup-Editable-Location.png"),
    "text": "Bienvenido al App Oficial del DevFest Campeche 2024",
    "backgroundColor": "#FFFFFF",
    "textColor": "#000000",
    "duration": 2.0,
}

_ONBOARDING: Document = {
    "pages": [
        {
            "id": "page1",
            "imageURL": _asset("resumen2019.JPG"),
            "title": "DevFest Campeche 2019",
            "description": "En 2019, inauguramos el capítulo y ese mismo año realizamos nuestro primer DevFest en la ciudad.",
            "backgroundColor": "#FFFFFF",
            "textColor": "#000000",
        },
        {
            "id": "page2",
            "imageURL": _asset("resumen2022.jpg"),
            "title": "DevFest Campeche 2022",
            "description": (
                "Regresamos en 2022 con un evento más grande y con muchas charlas. "
                "Tuvimos 11 conferencias, 8 tracks y más de 450 asistentes."
            ),
            "backgroundColor": "#FFFFFF",
            "textColor": "#000000",
        },
        {
            "id": "page3",
            "imageURL": _asset("resumen2022.jpg"),
            "title": "DevFest Campeche 2024",
            "description": "Hoy es el evento y aún no tengo foto oficial.",
            "backgroundColor": "#FFFFFF",
            "textColor": "#000000",
        },
    ],
    "showSkipButton": True,
    "buttonConfig": {
        "skipButtonTitle": "Saltar",
        "continueButtonTitle": "Siguiente",
        "finishButtonTitle": "Comenzar",
        "buttonColor": "#000000",
        "buttonTextColor": "#FFFFFF",
    },
}

_LOGIN: Document = {
    "title": "Iniciar Sesión",
    "subtitle": "Bienvenido de nuevo",
    "logoURL": _asset("Dev%20Fest%20Campeche%202022.png"),
    "backgroundColor": "#FFFFFF",
    "textColor": "#000000",
    "fields": [
        {
            "id": "email",
            "type": "email",
            "label": "Correo electrónico",
            "placeholder": "correo@ejemplo.com",
            "required": True,
            "validation": EMAIL_PATTERN,
            "errorMessage": "Correo inválido",
            "order": 1,
            "keyboardType": "email",
            "autocapitalization": "none",
        },
        {
            "id": "password",
            "type": "password",
            "label": "Contraseña",
            "placeholder": "Ingresa tu contraseña",
            "required": True,
            "validation": r"^.{6,}$",
            "errorMessage": "Mínimo 6 caracteres",
            "order": 2,
            "keyboardType": "default",
            "autocapitalization": "none",
        },
    ],
    "buttons": [
        {
            "id": "login",
            "type": "primary",
            "title": "Iniciar Sesión",
            "style": "filled",
            "order": 1,
            "action": "login",
            "backgroundColor": "#007AFF",
            "textColor": "#FFFFFF",
            "icon": None,
        },
        {
            "id": "apple",
            "type": "social",
            "title": "Continuar con Apple",
            "style": "outlined",
            "order": 2,
            "action": "appleSignIn",
            "backgroundColor": "#FFFFFF",
            "textColor": "#000000",
            "icon": "apple.logo",
        },
        {
            "id": "google",
            "type": "social",
            "title": "Continuar con Google",
            "style": "outlined",
            "order": 3,
            "action": "googleSignIn",
            "backgroundColor": "#FFFFFF",
            "textColor": "#ea4335",
            "icon": "g.circle.fill",
        },
        {
            "id": "register",
            "type": "link",
            "title": "¿No tienes cuenta? Regístrate",
            "style": "plain",
            "order": 4,
            "action": "register",
            "backgroundColor": None,
            "textColor": "#007AFF",
            "icon": None,
        },
    ],
    "socialButtons": False,
    "socialConfig": {"showApple": False, "showGoogle": True},
    "dividerText": "o continúa con",
}

_REGISTRATION: Document = {
    "title": "Registro",
    "subtitle": "Crea tu cuenta",
    "logoURL": _asset("Dev%20Fest%20Campeche%202022.png"),
    "backgroundColor": "#FFFFFF",
    "textColor": "#000000",
    "fields": [
        {
            "id": "name",
            "type": "text",
            "label": "Nombre completo",
            "placeholder": "Ingresa tu nombre",
            "required": True,
            "validation": r"^[a-zA-Z\s]{2,}$",
            "errorMessage": "Por favor ingresa un nombre válido",
            "order": 1,
            "keyboardType": "default",
            "autocapitalization": "words",
        },
        {
            "id": "email",
            "type": "email",
            "label": "Correo electrónico",
            "placeholder": "correo@ejemplo.com",
            "required": True,
            "validation": EMAIL_PATTERN,
            "errorMessage": "Por favor ingresa un correo válido",
            "order": 2,
            "keyboardType": "email",
            "autocapitalization": "none",
        },
        {
            "id": "password",
            "type": "password",
            "label": "Contraseña",
            "placeholder": "Ingresa tu contraseña",
            "required": True,
            "validation": r"^(?=.*[A-Za-z])(?=.*\d)[A-Za-z\d]{8,}$",
            "errorMessage": "La contraseña debe tener al menos 8 caracteres, una letra y un número",
            "order": 3,
            "keyboardType": "default",
            "autocapitalization": "none",
        },
    ],
    "buttons": [
        {
            "id": "register",
            "type": "primary",
            "title": "Registrarse",
            "style": "filled",
            "order": 1,
            "action": "register",
            "backgroundColor": "#007AFF",
            "textColor": "#FFFFFF",
            "icon": None,
        }
    ],
    "termsText": "Al registrarte, aceptas nuestros Términos y Condiciones y Política de Privacidad",
    "privacyText": "Lee nuestra política de privacidad",
}


def _talk(
    talk_id: str,
    title: str,
    description: str,
    speaker: str,
    role: str,
    image: str,
    time: str,
    track_id: str,
    tags: List[str],
) -> Document:
    return {
        "id": talk_id,
        "title": title,
        "description": description,
        "speakerName": speaker,
        "speakerRole": role,
        "imageURL": _asset(image),
        "time": time,
        "location": "Escenario Principal",
        "trackId": track_id,
        "tags": tags,
    }


_HOME: Document = {
    "welcomeText": "DevFest Campeche 2024",
    "imageURL": _asset("Copia%20de%20DF24-Form-Header-Editable.png"),
    "backgroundColor": "#FFFFFF",
    "textColor": "#000000",
    "tracksConfig": {
        "selectedTrackId": "ai_ml",
        "tracks": [
            {
                "id": "ai_ml",
                "name": "AI/ML",
                "color": "#4285F4",
                "talks": [
                    _talk(
                        "nathaly_alarcon_charla",
                        "Construye tus propias aplicaciones con Gemini",
                        "Cómo conectarse a Gemini, prototipar y crear tus propias apps utilizando el poder de Gemini.",
                        "Nathaly Alarcon Torrico",
                        "Data Science Engineer Team Lead",
                        "nataly.png",
                        "10:30 - 11:20",
                        "ai_ml",
                        ["AI/ML", "Gemini"],
                    ),
                    _talk(
                        "lesly_zerna_charla",
                        "Construyendo Proyectos con IA: Desde Redes Neuronales hasta Generative AI con Responsabilidad",
                        "Desde los fundamentos de las redes neuronales hasta las fronteras de la Generative AI.",
                        "Lesly Zerna",
                        "Curriculum Developer at DeepLearning.AI",
                        "lesly.png",
                        "13:30 - 14:20",
                        "ai_ml",
                        ["AI/ML", "ML Focus Area - Responsible ML/AI"],
                    ),
                ],
            },
            {
                "id": "web",
                "name": "Web",
                "color": "#34A853",
                "talks": [
                    _talk(
                        "damian_sire_charla",
                        "Angular Signals: Una introducción profunda en las nuevas características + Angular con IA",
                        "Cómo las señales pueden ayudarnos a crear aplicaciones más rápidas y eficientes.",
                        "Damián Sire",
                        "Head of Maintenance at Ingenious Agency",
                        "damian.png",
                        "15:30 - 16:20",
                        "web",
                        ["Angular", "Web Technologies", "Gemini"],
                    ),
                    _talk(
                        "luis_aviles_charla",
                        "Aplicaciones web impulsadas por IA: Una integración de modelos Gemini y APIs de Chrome",
                        "TypeScript, Angular y NestJS para crear una aplicación web full-stack desde cero.",
                        "Luis Aviles",
                        "Technical Lead",
                        "luis.png",
                        "18:30 - 19:20",
                        "web",
                        ["Angular", "AI/ML", "Gemini", "Chrome", "Web Technologies"],
                    ),
                ],
            },
            {
                "id": "mobile",
                "name": "Mobile",
                "color": "#FBBC04",
                "talks": [
                    _talk(
                        "rene_sandoval_charla",
                        "Server-Driven UI: Actualiza tu App sin Nuevas Publicaciones",
                        "Actualiza y personaliza tu aplicación móvil en tiempo real sin lanzar nuevas versiones.",
                        "René Sandoval",
                        "Senior iOS Engineer",
                        "rene.png",
                        "18:00 - 18:45",
                        "mobile",
                        ["Mobile", "iOS", "Server-Driven UI"],
                    )
                ],
            },
            {
                "id": "soft_skills",
                "name": "Soft Skills",
                "color": "#EA4335",
                "talks": [
                    _talk(
                        "don_chambitas_charla",
                        "¿Cómo comienzo mi currículum?",
                        "Las principales secciones que un currículum asertivo debería contener.",
                        "Hugo Hernández",
                        "CEO at Don Chambitas",
                        "rene.png",
                        "11:30 - 12:20",
                        "soft_skills",
                        ["Soft Skills", "Career Development"],
                    )
                ],
            },
        ],
    },
}

_DEFAULTS: Dict[ScreenKey, Document] = {
    ScreenKey.SPLASH: _SPLASH,
    ScreenKey.ONBOARDING: _ONBOARDING,
    ScreenKey.LOGIN: _LOGIN,
    ScreenKey.REGISTRATION: _REGISTRATION,
    ScreenKey.HOME: _HOME,
}


def default_documents() -> List[Tuple[ScreenKey, Document]]:
    """Fresh copies of the default documents, in seeding order."""
    return [(key, copy.deepcopy(_DEFAULTS[key])) for key in ScreenKey]
