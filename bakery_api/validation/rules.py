"""
Bakery API — Rule sets for every validated request body
"""
import re

from bakery_api.validation.engine import Check, Equals, OneOf, Require

NAME_RE = r"[A-Za-z\s]+"
DELIVERY_METHOD_RE = r"Pick Up|Delivery"
DATE_RE = r"[A-Z][a-z]{2}\s([1-3][0-9]|[1-9]),\s[0-9]{4}"
ADDRESS_LINE_RE = r"[A-Za-z0-9.,\-\s]+"
ADDRESS_LINE2_RE = r"[A-Za-z0-9.,\-\s]*"
CITY_RE = r"[A-Za-z0-9\-\s]+"
CATERING_ADDRESS_RE = r"[A-Za-z0-9.,\-'\s]+"
CAKE_TYPE_RE = r"Number Cake|Standard Cake|Letter Cake|Shape Cake"
CAKE_SIZE_RE = r"6 Inches|8 Inches|10 Inches|[0-9]+|[A-Za-z\s]+"
CAKE_COLOR_RE = r"[A-Za-z,\-\s]+"
# Anything printable except "_"; ASCII mode so accented letters count as \W.
FREE_TEXT_RE = re.compile(r"[A-Za-z0-9\W\s]+", re.ASCII)
OPTIONAL_FREE_TEXT_RE = re.compile(r"[A-Za-z0-9\W\s]*", re.ASCII)

PICK_UP = "Pick Up"


# ─── Shared field chains ──────────────────────────────────────────────────────

def name_check() -> Check:
    return (
        Check("name").not_empty("Name field is empty").trim()
        .length(6, 65, "Name (First and Last together) must be 6-65 characters")
        .matches(NAME_RE, "Name must contain letters only")
    )


def delivery_method_check() -> Check:
    return (
        Check("deliveryMethod").not_empty("Delivery Method field is empty").trim()
        .matches(DELIVERY_METHOD_RE, "Delivery Method invalid")
    )


def payment_method_check(expected: str) -> Check:
    return (
        Check("paymentMethod").not_empty("Payment Method field is empty").trim()
        .matches(re.escape(expected), "Payment Method invalid")
    )


def date_check(path: str = "dateForOrder", label: str = "Date for order") -> Check:
    return (
        Check(path).not_empty(f"{label} field is empty").trim()
        .matches(DATE_RE, f"{label} is invalid")
    )


def email_check(min: int = 5, max: int | None = 65) -> Check:
    if max is None:
        length_message = f"Email must be at least {min} characters long"
    else:
        length_message = f"Email must be between {min}-{max} characters"
    return (
        Check("email").not_empty("Email field is empty").trim()
        .length(min, max, length_message)
        .is_email("Email is invalid").normalize_email()
    )


def phone_check() -> Check:
    return Check("phone").not_empty("Phone field is empty").trim().is_phone("Invalid phone number")


def state_check(path: str) -> Check:
    return (
        Check(path).not_empty("State field is empty").trim()
        .length(2, 2, "State must be 2 letter abbreviation").is_alpha("State is invalid")
    )


def zip_check(path: str) -> Check:
    return (
        Check(path).not_empty("Zip code field is empty").trim()
        .length(5, 5, "Zip code must be 5 digits").is_postal_code("Zip code is invalid")
    )


def free_text_check(path: str, label: str, min: int = 10, max: int | None = 300) -> Check:
    if max is None:
        length_message = f"{label} must be at least {min} characters"
    else:
        length_message = f"{label} must be between {min}-{max} characters"
    return (
        Check(path).not_empty(f"{label} field is empty").trim()
        .length(min, max, length_message)
        .matches(FREE_TEXT_RE, f"{label} contains an invalid input")
    )


def numeric_check(path: str, label: str) -> Check:
    return Check(path).not_empty(f"{label} field is empty").trim().is_numeric(f"{label} contains an invalid input")


# ─── Address blocks ───────────────────────────────────────────────────────────

ORDER_ADDRESS = Require(
    Check("address.0").not_empty("Address field is empty").trim()
    .length(5, 65, "Address must be between 5-65 characters")
    .matches(ADDRESS_LINE_RE, "Address is invalid"),
    Check("address.1").trim()
    .matches(ADDRESS_LINE2_RE, "Apt field contains an invalid character")
    .length(0, 15, "Apt must be less than 15 characters"),
    Check("address.2").not_empty("City field is empty").trim()
    .length(3, 30, "City must be between 3-30 characters")
    .matches(CITY_RE, "City contains invalid character"),
    state_check("address.3"),
    zip_check("address.4"),
)

CATERING_ADDRESS = Require(
    Check("address.0").not_empty("Address field is empty").trim()
    .length(5, 65, "Address must be between 5-65 characters")
    .matches(CATERING_ADDRESS_RE, "Address is invalid"),
    Check("address.1").not_empty("City field is empty").trim()
    .length(3, 30, "City must be between 3-30 characters")
    .matches(CATERING_ADDRESS_RE, "City is invalid"),
    state_check("address.2"),
    zip_check("address.3"),
)


def address_group(block: Require) -> OneOf:
    """Address is validated in full unless the order is picked up."""
    return OneOf(block, Equals("deliveryMethod", PICK_UP))


# ─── Order submissions ────────────────────────────────────────────────────────

def _total_checks() -> list[Check]:
    return [
        Check(f"total.{i}").not_empty("Total Field is incomplete").trim()
        .length(1, 10, "Total must be between 1-10 characters")
        .is_numeric("Invalid total")
        for i in range(3)
    ]


def _regular_order_rules(payment_method: str) -> list:
    return [
        name_check(),
        delivery_method_check(),
        payment_method_check(payment_method),
        date_check(),
        address_group(ORDER_ADDRESS),
        email_check(min=3, max=None),
        phone_check(),
        *_total_checks(),
        Check("cart").not_empty("Cart is empty").is_array("Invalid cart"),
    ]


ONLINE_ORDER_RULES = [
    *_regular_order_rules("Online Payment"),
    Check("id").not_empty("Card details are missing").trim(),
]
CASH_ORDER_RULES = _regular_order_rules("In Person")

CAKE_DETAILS = Require(
    Equals("orderType", "Cake"),
    Check("orderDetails.0").not_empty("Cake type field is empty").trim()
    .matches(CAKE_TYPE_RE, "Invalid Cake Type"),
    Check("orderDetails.1").not_empty("Cake size/shape/letter/number field is empty").trim()
    .matches(CAKE_SIZE_RE, "Cake size/shape/letter/number is invalid"),
    Check("orderDetails.2").not_empty("Cake color field is empty").trim()
    .length(3, 30, "Cake color must be between 3-30 characters")
    .matches(CAKE_COLOR_RE, "Cake color input is invalid"),
    free_text_check("orderDetails.3", "Cake order message"),
)

OTHER_DETAILS = Require(
    Equals("orderType", "Other"),
    free_text_check("orderDetails", "Other order message"),
)

CUSTOM_ORDER_RULES = [
    Check("orderType").not_empty("Order Type was not selected").trim()
    .matches(r"Cake|Other", "Invalid Order Type"),
    OneOf(CAKE_DETAILS, OTHER_DETAILS),
    name_check(),
    delivery_method_check(),
    date_check(),
    address_group(ORDER_ADDRESS),
    email_check(),
    phone_check(),
]

CATERING_ORDER_RULES = [
    name_check(),
    Check("eventType").not_empty("Type of Event field is empty").trim()
    .length(3, 30, "Type of Event must be between 3-30 characters")
    .matches(NAME_RE, "Type of Event must contain letters only"),
    Check("guestNum").not_empty("Number of Guests field is empty").trim()
    .length(1, 3, "Number of Guests can't be more than 3 digits")
    .matches(r"[0-9]+", "Number of Guests must contain numbers only"),
    delivery_method_check(),
    date_check(),
    address_group(CATERING_ADDRESS),
    email_check(),
    phone_check(),
    free_text_check("message", "Message"),
]


# ─── Content ──────────────────────────────────────────────────────────────────

MENU_ITEM_RULES = [
    Check("category").not_empty("Category field is empty").trim()
    .matches(r"Cupcakes|Cakes|Jars|Cakepops|Beverages|Other", "Invalid Category"),
    free_text_check("itemName", "Item Name", 3, 100),
    Check("price").not_empty("Price field is empty").trim()
    .length(1, 10, "Price must be between 1-10 characters")
    .is_numeric("Price must only contain numbers"),
    free_text_check("itemDesc", "Item Description", 5, 200),
]

FAQ_RULES = [
    Check("category").not_empty("Category field is empty").trim()
    .matches(r"Delivery|Pick Up|Ordering|Shape Cake|Allergy And Nutrition|Other", "Invalid Category"),
    free_text_check("question", "Question", 5, 200),
    free_text_check("answer", "Answer", 5, 500),
]

RECIPE_RULES = [
    free_text_check("recipeName", "Recipe Name", 3, 100),
    free_text_check("estTime", "Estimated Time", 1, 40),
    Check("servings").not_empty("Number of Servings field is empty").trim()
    .length(1, 10, "Number of Servings must be between 1-10 characters")
    .is_numeric("Number of Servings must only contain numbers"),
    free_text_check("description", "Description", 5, None),
    free_text_check("ingredients", "Ingredients", 5, None),
    free_text_check("directions", "Directions", 5, None),
    Check("bonusTips").trim()
    .matches(OPTIONAL_FREE_TEXT_RE, "Bonus Tips contains an invalid input")
    .length(0, 800, "Bonus Tips can't contain more than 800 characters"),
]

CONTACT_RULES = [
    name_check(),
    email_check(),
    Check("subject").not_empty("Subject field is empty").trim()
    .length(3, 30, "Subject must be 3-30 characters")
    .matches(NAME_RE, "Subject must contain letters only"),
    free_text_check("message", "Message"),
]

ABOUT_RULES = [free_text_check("about", "About", 10, None)]

MENU_PAGE_TOGGLE_RULES = [
    Check("toggle").not_empty("Menu Page Visibility Toggle field is empty")
    .is_boolean("Menu Page Visibility Toggle contains an invalid input"),
]
DELIVERY_AMOUNT_RULES = [numeric_check("amount", "Delivery Amount")]
ORDER_MIN_RULES = [numeric_check("minimum", "Minimum to Order")]
FREE_DELIVERY_MIN_RULES = [numeric_check("minimum", "Free Delivery Minimum")]
DELIVERY_DATE_RULES = [date_check("date", "Delivery Date")]
BLOCKED_DATES_RULES = [
    Check("dates").not_empty("Blocked Dates field is empty")
    .is_array("Blocked Dates contains an invalid input"),
]
