# ============================================================================
# FILE: tests/conftest.py
# ============================================================================
"""
Pytest configuration and shared fixtures for testing.
"""

import json

import pytest

from biomarker_ingestion.core.context import MeasurementRecord, MeasurementStatus, OptimalRange
from biomarker_ingestion.inference import BaseInferenceClient, InferenceRequest
from biomarker_ingestion.utils.exceptions import InferenceError


class FakeInferenceClient(BaseInferenceClient):
    """
    Inference client returning canned responses.

    responses: list consumed in call order, or a callable(request) -> str.
    A response that is an exception instance is raised instead.
    """

    def __init__(self, responses=None, config=None):
        super().__init__(config)
        self._responses = responses if responses is not None else []
        self.requests = []

    @property
    def model_name(self) -> str:
        return "fake-model"

    async def generate(self, request: InferenceRequest) -> str:
        self.requests.append(request)

        if callable(self._responses):
            response = self._responses(request)
        elif self._responses:
            response = self._responses.pop(0)
        else:
            raise InferenceError("No canned response left")

        if isinstance(response, Exception):
            raise response
        return response

    async def health_check(self):
        return {"healthy": True, "model": self.model_name, "details": "fake"}


@pytest.fixture
def fake_client_factory():
    """Build a FakeInferenceClient from canned responses"""
    return FakeInferenceClient


@pytest.fixture
def sample_lab_text():
    """Polish lab report with personal data, demographics and results"""
    return """LABORATORIUM ALAB Warszawa
Pacjent: Jan Kowalski
PESEL: 85010112345
Adres: ul. Długa 15a
Tel: +48 600 123 456
Email: jan.kowalski@example.com
Nr zlecenia: AB1234567
Wiek: 42 lata
Płeć: mężczyzna
Masa ciała: 83 kg
Wzrost: 181 cm
Data badania: 15.01.2025

Cholesterol całkowity    184,0    mg/dl    < 190,0
Glukoza                  92       mg/dl    70 - 99
"""


@pytest.fixture
def complete_response():
    """Well-formed extraction response"""
    return json.dumps({
        "biomarkers": [
            {
                "name": "Total Cholesterol",
                "value": "184,0",
                "unit": "mg/dL",
                "optimalRange": {"min": "0", "max": "190,0"}
            },
            {
                "name": "Glucose",
                "value": 92,
                "unit": "mg/dL",
                "optimalRange": {"min": 70, "max": 99}
            },
        ]
    }, ensure_ascii=False)


@pytest.fixture
def truncated_response():
    """Extraction response cut off inside the third record"""
    return (
        '{"biomarkers": [\n'
        '  {"name": "Total Cholesterol", "value": "184,0", "unit": "mg/dL", '
        '"optimalRange": {"min": "0", "max": "190,0"}},\n'
        '  {"name": "Glucose", "value": 92, "unit": "mg/dL", '
        '"optimalRange": {"min": 70, "max": 99}},\n'
        '  {"name": "CRP", "value": 0.8, "unit": "mg/L", "optimalRange": {"min": 0, "ma'
    )


def make_record(name, value, min_value, max_value, unit="mg/dL", status=None):
    """MeasurementRecord helper; status defaults to OPTIMAL"""
    return MeasurementRecord(
        name=name,
        value=value,
        unit=unit,
        optimal_range=OptimalRange(min=min_value, max=max_value),
        status=status or MeasurementStatus.OPTIMAL,
    )


@pytest.fixture
def record_factory():
    """Build MeasurementRecords in tests"""
    return make_record
