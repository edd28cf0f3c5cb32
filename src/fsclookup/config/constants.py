"""Constants describing the Food Security portal's results markup."""

# Placeholder for a field whose label was not found on the results page
NOT_AVAILABLE = "N/A"

# Placeholder for a member list with no serial-numbered rows
NO_MEMBERS_LISTED = "No members listed"

# Text confirming the results section was rendered
RESULTS_MARKER = "RATION CARD DETAILS"

# Heading of the household members table (matched case-insensitively)
MEMBER_SECTION_HEADING = "MEMBER DETAILS"

# Visible label of the search button on the search form
SEARCH_BUTTON_LABEL = "Search"

# Single-line text input holding the FSC number
SEARCH_INPUT_SELECTOR = "input[type='text']"

# Record field -> visible label preceding its value cell
FIELD_LABELS: dict[str, str] = {
    "new_ration_card_no": "New Ration Card No",
    "fsc_reference_no": "FSC Reference No",
    "card_type": "Card Type",
    "application_status": "Application Status",
    "head_of_family": "Head of the Family",
    "district": "District",
    "gas_connection": "Gas Connection",
}

# Fields whose joint absence signals "no record exists"
ANCHOR_FIELDS: tuple[str, ...] = ("head_of_family", "fsc_reference_no")

# Chromium flags for container hosts without a usable sandbox
BROWSER_LAUNCH_ARGS: list[str] = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-gpu",
    "--no-zygote",
]

NOT_FOUND_REASON = "No details found for this FSC number."
MISSING_NUMBER_MESSAGE = "FSC number missing"
INTERNAL_ERROR_MESSAGE = "Internal API Error during data fetching. Check logs for details."
CAPACITY_ERROR_MESSAGE = "Lookup capacity exhausted, try again later."
