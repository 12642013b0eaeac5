"""DDL for the invoices table."""

CREATE_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS invoices (
    id UUID PRIMARY KEY,
    status VARCHAR(20) NOT NULL DEFAULT 'PENDING'
        CHECK (status IN ('PENDING', 'PROCESSING', 'COMPLETED', 'FAILED')),

    -- Extracted fields (NULL until status='COMPLETED')
    client_number VARCHAR(20),
    reference_month DATE,
    electricity_quantity NUMERIC(14, 2),
    electricity_value NUMERIC(14, 2),
    scee_quantity NUMERIC(14, 2),
    scee_value NUMERIC(14, 2),
    compensated_energy_quantity NUMERIC(14, 2),
    compensated_energy_value NUMERIC(14, 2),
    public_lighting_value NUMERIC(14, 2),

    -- Object key in the processed bucket
    pdf_url VARCHAR(1024),
    error TEXT,

    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
);
"""

CREATE_INDEXES_SQL = [
    "CREATE INDEX IF NOT EXISTS idx_invoices_client_number ON invoices(client_number);",
    "CREATE INDEX IF NOT EXISTS idx_invoices_reference_month ON invoices(reference_month);",
    "CREATE INDEX IF NOT EXISTS idx_invoices_status ON invoices(status);",
]
