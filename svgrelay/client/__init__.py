from .preview import PreviewRegistry
from .relay_client import RelayClient, RelayClientError
from .upload_widget import IncomingFile, ProcessResult, SelectedImage, UploadState, UploadWidget
