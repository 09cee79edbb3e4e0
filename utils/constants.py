"""
utils/constants.py

Purpose: Centralized static content

- User-facing response messages
- OTP SMS text
- Reusable defaults

(Prevents hardcoding across the codebase)
"""

# ============================================================
# IDENTITY
# ============================================================

OTP_SMS_TEMPLATE = "Welcome to Billing Habit. Your login OTP for {number} is {otp}. It expires in {minutes} minutes."

MSG_INVALID_NUMBER = "Invalid Mobile Number."
MSG_OTP_SENT = "OTP sent successfully. Please check your phone."
MSG_OTP_REQUIRED = "Mobile number and OTP are required."
MSG_INVALID_OTP = "Invalid or expired OTP."
MSG_LOGIN_SUCCESS = "Login successful."
MSG_USER_NOT_FOUND = "User not found."
MSG_NAME_REQUIRED = "Name is required."
MSG_INVALID_PIN = "Create a 4-digit PIN that does not start with 0."
MSG_PROFILE_UPDATED = "Profile updated successfully."
MSG_NO_CREDITS = "You have no credits left."
MSG_CREDIT_USED = "Credit used."
MSG_LOGGED_OUT = "User logged out successfully."
MSG_NOT_AUTHORISED = "Not Authorised. Login Again"
MSG_INVALID_TOKEN = "Invalid or expired token."

# ============================================================
# CATALOG
# ============================================================

MSG_CATEGORY_NAME_REQUIRED = "Category name is required."
MSG_CATEGORY_EXISTS = "A category with this name already exists."
MSG_CATEGORY_CREATED = "Category created successfully."
MSG_CATEGORY_NOT_FOUND = "Category not found."

MSG_SUB_CATEGORY_REQUIRED = "Name and parent category ID are required."
MSG_SUB_CATEGORY_CREATED = "Sub-category created successfully."
MSG_SUB_CATEGORY_NOT_FOUND = "Sub-category not found."

MSG_PRODUCT_REQUIRED = "Label and sub-category are required."
MSG_PRODUCT_CREATED = "Product created successfully."
MSG_PRODUCT_IDS_REQUIRED = "Product IDs are required."
MSG_INVALID_PRICE = "Prices must be zero or more."

DEFAULT_PRODUCT_UNIT = "pcs"
DEFAULT_PRODUCT_TYPE = "number"

# ============================================================
# CUSTOMERS
# ============================================================

MSG_CUSTOMER_NAME_REQUIRED = "Customer name is required."
MSG_CUSTOMER_NUMBER_REQUIRED = "Customer number is required."
MSG_CUSTOMER_CREATED = "Customer created successfully."
MSG_CUSTOMER_NOT_FOUND = "Customer not found."

# ============================================================
# QUOTES
# ============================================================

MSG_QUOTE_INPUT_REQUIRED = "Customer and at least one item are required."
MSG_NO_VALID_ITEMS = "No valid items to quote."
MSG_INVALID_QUANTITY = "Quantity must be a number of at least 1."
MSG_QUOTE_CREATED = "Quote created successfully!"
MSG_QUOTE_NOT_FOUND = "Quote not found or access denied."

MSG_INVALID_ID = "Invalid {field}."
