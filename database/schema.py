SCHEMA = """
CREATE EXTENSION IF NOT EXISTS pgcrypto;

CREATE TABLE IF NOT EXISTS customers (
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    phone_number TEXT UNIQUE NOT NULL,
    name TEXT NOT NULL CHECK (length(trim(name)) > 0),
    created_at TIMESTAMPTZ DEFAULT now()
);

CREATE TABLE IF NOT EXISTS businesses (
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    owner_phone TEXT UNIQUE NOT NULL,
    name TEXT NOT NULL CHECK (length(trim(name)) > 0),
    type TEXT NOT NULL DEFAULT 'other'
        CHECK (type IN ('salon', 'barbershop', 'restaurant', 'cafe', 'spa', 'other')),
    points_per_visit INTEGER NOT NULL DEFAULT 10 CHECK (points_per_visit > 0),
    created_at TIMESTAMPTZ DEFAULT now()
);

-- Append-only visit log
CREATE TABLE IF NOT EXISTS visits (
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    customer_id UUID NOT NULL REFERENCES customers(id),
    business_id UUID NOT NULL REFERENCES businesses(id),
    points_earned INTEGER NOT NULL CHECK (points_earned > 0),
    visit_date TIMESTAMPTZ DEFAULT now()
);

CREATE INDEX IF NOT EXISTS idx_visits_business_date ON visits(business_id, visit_date DESC);
CREATE INDEX IF NOT EXISTS idx_visits_customer_date ON visits(customer_id, visit_date DESC);

CREATE TABLE IF NOT EXISTS customer_businesses (
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    customer_id UUID NOT NULL REFERENCES customers(id),
    business_id UUID NOT NULL REFERENCES businesses(id),
    total_visits INTEGER NOT NULL DEFAULT 0 CHECK (total_visits >= 0),
    total_points_earned INTEGER NOT NULL DEFAULT 0 CHECK (total_points_earned >= 0),
    created_at TIMESTAMPTZ DEFAULT now(),
    updated_at TIMESTAMPTZ DEFAULT now(),
    UNIQUE (customer_id, business_id)
);

CREATE TABLE IF NOT EXISTS rewards (
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    business_id UUID NOT NULL REFERENCES businesses(id) ON DELETE CASCADE,
    name TEXT NOT NULL,
    description TEXT,
    points_required INTEGER NOT NULL CHECK (points_required >= 0),
    is_active BOOLEAN NOT NULL DEFAULT TRUE,
    created_at TIMESTAMPTZ DEFAULT now()
);

CREATE INDEX IF NOT EXISTS idx_rewards_business ON rewards(business_id);

CREATE TABLE IF NOT EXISTS redemptions (
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    customer_id UUID NOT NULL REFERENCES customers(id),
    business_id UUID NOT NULL REFERENCES businesses(id),
    reward_id UUID REFERENCES rewards(id),
    points_spent INTEGER NOT NULL CHECK (points_spent >= 0),
    redeemed_at TIMESTAMPTZ DEFAULT now()
);

CREATE OR REPLACE VIEW customer_points AS
SELECT
    c.id AS customer_id,
    c.phone_number,
    c.name,
    COALESCE(v.points_earned, 0) AS total_points_earned,
    COALESCE(r.points_spent, 0) AS total_points_spent,
    COALESCE(v.points_earned, 0) - COALESCE(r.points_spent, 0) AS available_points,
    COALESCE(v.visit_count, 0) AS total_visits
FROM customers c
LEFT JOIN (
    SELECT customer_id, SUM(points_earned) AS points_earned, COUNT(*) AS visit_count
    FROM visits GROUP BY customer_id
) v ON v.customer_id = c.id
LEFT JOIN (
    SELECT customer_id, SUM(points_spent) AS points_spent
    FROM redemptions GROUP BY customer_id
) r ON r.customer_id = c.id;

CREATE OR REPLACE VIEW business_analytics AS
SELECT
    b.id AS business_id,
    b.name,
    COALESCE(v.customer_count, 0) AS total_customers,
    COALESCE(v.visit_count, 0) AS total_visits,
    COALESCE(v.avg_points, 0) AS avg_points_per_visit,
    COALESCE(r.redemption_count, 0) AS total_redemptions
FROM businesses b
LEFT JOIN (
    SELECT business_id,
           COUNT(DISTINCT customer_id) AS customer_count,
           COUNT(*) AS visit_count,
           ROUND(AVG(points_earned), 2) AS avg_points
    FROM visits GROUP BY business_id
) v ON v.business_id = b.id
LEFT JOIN (
    SELECT business_id, COUNT(*) AS redemption_count
    FROM redemptions GROUP BY business_id
) r ON r.business_id = b.id;

-- Visit append and relation increment in one transaction.
-- The upsert takes a row lock on the (customer, business) pair so concurrent
-- check-ins serialize their increments.
CREATE OR REPLACE FUNCTION check_in_customer(
    p_customer_id UUID,
    p_business_id UUID,
    p_points INTEGER
) RETURNS SETOF visits
LANGUAGE plpgsql
AS $$
DECLARE
    v_visit_id UUID;
BEGIN
    IF NOT EXISTS (SELECT 1 FROM customers WHERE id = p_customer_id) THEN
        RAISE EXCEPTION 'Customer not found' USING ERRCODE = 'P0002';
    END IF;

    INSERT INTO visits (customer_id, business_id, points_earned)
    VALUES (p_customer_id, p_business_id, p_points)
    RETURNING id INTO v_visit_id;

    INSERT INTO customer_businesses (customer_id, business_id, total_visits, total_points_earned)
    VALUES (p_customer_id, p_business_id, 1, p_points)
    ON CONFLICT (customer_id, business_id) DO UPDATE SET
        total_visits = customer_businesses.total_visits + 1,
        total_points_earned = customer_businesses.total_points_earned + EXCLUDED.total_points_earned,
        updated_at = now();

    RETURN QUERY SELECT * FROM visits WHERE id = v_visit_id;
END;
$$;
"""
