"""
Safety recommendations.

Everything here is a pure function of condition type and severity, so the same
condition always carries the same advice.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..algorithms.geo import haversine_km, miles_to_km
from ..core import constants
from ..models import ConditionType, Severity, WeatherCondition

EXPECTED_DURATION = {
    ConditionType.HURRICANE: "24-48 hours",
    ConditionType.SEVERE_STORM: "2-6 hours",
    ConditionType.STORM: "1-4 hours",
    ConditionType.RAIN: "1-3 hours",
    ConditionType.FLOOD: "6-24 hours",
}

INTENSITY_LABELS = {
    Severity.EXTREME: "Extreme",
    Severity.SEVERE: "High",
    Severity.MODERATE: "Medium",
    Severity.MINOR: "Low",
}

SAFETY_ADVICE: Dict[ConditionType, List[str]] = {
    ConditionType.HURRICANE: [
        "Follow evacuation orders from local officials",
        "Secure outdoor objects and board up windows",
        "Keep at least 3 days of water, food and medication",
        "Charge phones and keep a battery radio nearby",
        "Stay away from windows during the storm",
    ],
    ConditionType.SEVERE_STORM: [
        "Move to an interior room on the lowest floor",
        "Avoid windows and glass doors",
        "Unplug sensitive electronics",
        "Do not shelter under trees",
    ],
    ConditionType.STORM: [
        "Stay indoors if possible",
        "Secure loose outdoor items",
        "Avoid driving through standing water",
    ],
    ConditionType.RAIN: [
        "Drive slowly and increase following distance",
        "Watch for ponding on roads",
        "Carry rain gear",
    ],
    ConditionType.FLOOD: [
        "Move to higher ground",
        "Never walk or drive through flood water",
        "Turn off utilities if instructed",
        "Avoid contact with flood water",
    ],
    ConditionType.SEVERE: [
        "Follow instructions from local officials",
        "Stay informed through official channels",
        "Keep an emergency kit ready",
    ],
    ConditionType.MODERATE: [
        "Stay informed about changing conditions",
        "Review your emergency plan",
    ],
}

IMMEDIATE_ACTION = "TAKE IMMEDIATE ACTION to protect life and property"


def expected_duration(condition_type: ConditionType) -> str:
    """Typical duration of a condition type."""
    return EXPECTED_DURATION.get(condition_type, "Unknown")


def intensity_label(severity: Severity) -> str:
    """Human-readable intensity for a severity."""
    return INTENSITY_LABELS[severity]


def safety_advice(condition_type: ConditionType, severity: Severity) -> List[str]:
    """
    Safety steps for a condition.

    Severe and extreme conditions are prefixed with an immediate-action line.

    Args:
        condition_type: Condition type
        severity: Condition severity

    Returns:
        Ordered list of safety steps
    """
    advice = list(SAFETY_ADVICE.get(condition_type, ["Monitor local weather reports"]))
    if severity >= Severity.SEVERE:
        advice.insert(0, IMMEDIATE_ACTION)
    return advice


def recommendation_for(
    condition_type: ConditionType,
    severity: Severity,
    official: bool = False
) -> str:
    """
    Recommendation text for a condition.

    Args:
        condition_type: Condition type
        severity: Condition severity
        official: Whether the condition comes from a government alert

    Returns:
        Recommendation sentence
    """
    if official:
        return (
            "OFFICIAL ALERT: Follow the instructions of local emergency management "
            "and monitor official channels."
        )

    if condition_type == ConditionType.HURRICANE:
        if severity == Severity.EXTREME:
            return (
                "IMMEDIATE ACTION REQUIRED: Follow evacuation orders, move to a "
                "designated shelter and keep emergency supplies with you."
            )
        return (
            "PREPARE NOW: Review evacuation routes, secure your home and gather "
            "water, food and medication for at least 3 days."
        )

    if condition_type == ConditionType.SEVERE_STORM:
        return "Seek shelter indoors, stay away from windows and avoid travel until the storm passes."

    if condition_type == ConditionType.STORM:
        return "Stay indoors when possible, secure loose objects and avoid flooded roads."

    if condition_type == ConditionType.FLOOD:
        return "Move to higher ground and never drive through flood water."

    if condition_type == ConditionType.RAIN:
        if severity >= Severity.MODERATE:
            return "Expect heavy rain: drive carefully and watch for localized flooding."
        return "Light rain expected: carry rain gear and allow extra travel time."

    if condition_type in (ConditionType.SEVERE, ConditionType.MODERATE):
        return "Stay informed through official channels and review your emergency plan."

    return "No action needed."


def hurricane_risk_zone(lat: float, lng: float) -> Optional[str]:
    """
    Name of the hurricane risk zone containing a location.

    Args:
        lat: Latitude
        lng: Longitude

    Returns:
        Zone name, or None outside every zone
    """
    for zone in constants.HURRICANE_RISK_ZONES:
        distance_km = haversine_km(lat, lng, zone["lat"], zone["lng"])
        if distance_km <= miles_to_km(zone["radius_miles"]):
            return zone["name"]
    return None


def is_hurricane_risk_zone(lat: float, lng: float) -> bool:
    return hurricane_risk_zone(lat, lng) is not None


@dataclass
class ActionRecommendation:
    """What a person should do about the current condition."""

    action: str  # evacuate, shelter_in_place, prepare, monitor, normal
    urgency: str
    message: str
    steps: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, object]:
        return {
            "action": self.action,
            "urgency": self.urgency,
            "message": self.message,
            "steps": list(self.steps),
        }


def recommend_action(
    condition: Optional[WeatherCondition],
    lat: Optional[float] = None,
    lng: Optional[float] = None
) -> ActionRecommendation:
    """
    Map a condition to an action.

    Extreme hurricanes call for evacuation inside known risk zones (or when the
    location is unknown) and shelter in place elsewhere.

    Args:
        condition: Current condition or None
        lat: Latitude of the person, if known
        lng: Longitude of the person, if known

    Returns:
        Action recommendation
    """
    if condition is None:
        return ActionRecommendation("normal", "none", "No significant weather expected.")

    steps = safety_advice(condition.type, condition.severity)

    if condition.severity == Severity.EXTREME:
        in_zone = lat is None or lng is None or is_hurricane_risk_zone(lat, lng)
        if condition.type == ConditionType.HURRICANE and in_zone:
            return ActionRecommendation("evacuate", "immediate", condition.recommendation, steps)
        return ActionRecommendation("shelter_in_place", "immediate", condition.recommendation, steps)

    if condition.severity == Severity.SEVERE:
        if condition.type in (ConditionType.HURRICANE, ConditionType.FLOOD):
            return ActionRecommendation("prepare", "high", condition.recommendation, steps)
        return ActionRecommendation("shelter_in_place", "high", condition.recommendation, steps)

    if condition.severity == Severity.MODERATE:
        return ActionRecommendation("monitor", "medium", condition.recommendation, steps)

    return ActionRecommendation("normal", "low", condition.recommendation, steps)
