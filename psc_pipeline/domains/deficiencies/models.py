"""Pandera schema for the raw PSC deficiency export."""

from pandera.pandas import Check, Column, DataFrameSchema

RawDeficiencySchema = DataFrameSchema(
    columns={
        "Nature of deficiency": Column(
            str,
            Check.str_length(max_value=2000),
            nullable=True,
            required=False,
        ),
        "Reference Code1": Column(
            str,
            Check.str_matches(r"^\d*$"),
            nullable=True,
            required=False,
        ),
        "Port Name": Column(str, nullable=True, required=False),
        "Country": Column(str, nullable=True, required=False),
        "Inspection - From Date": Column(str, nullable=True, required=False),
        "Vessel Type": Column(str, nullable=True, required=False),
    },
    coerce=True,
    strict=False,
)
