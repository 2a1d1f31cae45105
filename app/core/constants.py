"""Application constants."""

# Settings table holds a single row with this primary key
SETTINGS_ROW_ID = 1

# Stats windows (relative to today)
DAILY_WINDOW_DAYS = 7
WEEKLY_WINDOW_DAYS = 28
MONTHLY_WINDOW_MONTHS = 6

# Buckets kept per period after grouping (most recent N)
DAILY_BUCKET_LIMIT = 7
WEEKLY_BUCKET_LIMIT = 4
MONTHLY_BUCKET_LIMIT = 6

# BMI category upper bounds (exclusive); anything at or above the last is obese
BMI_UNDERWEIGHT_BELOW = 18.5
BMI_NORMAL_BELOW = 23.0
BMI_OVERWEIGHT_BELOW = 25.0

# Chart y-axis padding around the bucket extrema (kg)
CHART_PADDING_KG = 2
