"""User-facing messages shown in the error slot and on screen."""

INVALID_FILE_TYPE = "Please upload a valid JPEG or PNG file."
EMPTY_FILE = "The selected file is empty."
FILE_TOO_LARGE = "The selected image is larger than {max_mb} MB."
UNREADABLE_IMAGE = "The selected file could not be read as an image."
IMAGE_TOO_LARGE = "The selected image has too many pixels to process."

NO_IMAGE_SELECTED = "Please select an image first."
API_KEY_NOT_SET = "API key is not set."
API_KEY_REQUIRED = "Please enter your API key."
INVALID_API_KEY = "The API key is not valid. Please enter a correct key."
EMPTY_RESULT = (
    "The AI could not extract any data from the image. "
    "Please try again with a clearer image."
)
UNKNOWN_ERROR = "An unknown error occurred."

NO_DATA_TO_DOWNLOAD = "There is no data available to download."
