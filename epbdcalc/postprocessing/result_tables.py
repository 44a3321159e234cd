"""Tables of energy performance results as pandas DataFrames."""

# clean

import pandas as pd

from epbdcalc.balance.energy_performance import EnergyPerformance

CARRIER_COLUMNS = [
    "used_epus",
    "used_nepus",
    "produced",
    "delivered_grid",
    "delivered_onst",
    "exported_grid",
    "exported_nepus",
    "we_a_ren",
    "we_a_nren",
    "we_a_co2",
    "we_b_ren",
    "we_b_nren",
    "we_b_co2",
]

SERVICE_COLUMNS = ["used_epus", "we_a_ren", "we_a_nren", "we_a_co2", "we_b_ren", "we_b_nren", "we_b_co2"]


def carrier_results_dataframe(energy_performance: EnergyPerformance, per_area: bool = False) -> pd.DataFrame:
    """Annual results of every carrier, one row per carrier.

    With per_area the values are divided by the reference area.
    """
    k_area = 1.0 / energy_performance.arearef if per_area else 1.0
    rows = {}
    for carrier, balance in energy_performance.balance_cr.items():
        rows[carrier.value] = [
            balance.used.epus_an,
            balance.used.nepus_an,
            balance.produced.an,
            balance.delivered.grid_an,
            balance.delivered.onst_an,
            balance.exported.grid_an,
            balance.exported.nepus_an,
            balance.weighted.a.ren,
            balance.weighted.a.nren,
            balance.weighted.a.co2,
            balance.weighted.b.ren,
            balance.weighted.b.nren,
            balance.weighted.b.co2,
        ]
    dataframe = pd.DataFrame.from_dict(rows, orient="index", columns=CARRIER_COLUMNS) * k_area
    dataframe.index.name = "carrier"
    return dataframe


def service_results_dataframe(energy_performance: EnergyPerformance, per_area: bool = False) -> pd.DataFrame:
    """Used and weighted energy of every EPB service of the building, one row per service."""
    balance = energy_performance.balance_m2 if per_area else energy_performance.balance
    rows = {}
    for service, used in balance.used.epus_by_srv.items():
        we_a = balance.weighted.a_by_srv.get(service)
        we_b = balance.weighted.b_by_srv.get(service)
        rows[service.value] = [
            used,
            we_a.ren if we_a else 0.0,
            we_a.nren if we_a else 0.0,
            we_a.co2 if we_a else 0.0,
            we_b.ren if we_b else 0.0,
            we_b.nren if we_b else 0.0,
            we_b.co2 if we_b else 0.0,
        ]
    dataframe = pd.DataFrame.from_dict(rows, orient="index", columns=SERVICE_COLUMNS)
    dataframe.index.name = "service"
    return dataframe
