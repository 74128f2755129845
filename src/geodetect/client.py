"""
Handles interfacing with the detection API v2, documented at:
https://app.picterra.ch/public/apidocs/v2/
"""
from __future__ import annotations

import logging
import os
from typing import Any, Literal

from geodetect.base_client import BaseAPIClient, _check_resp_is_ok
from geodetect.exceptions import APIError
from geodetect.polling import SUCCESS_STATUSES
from geodetect.uploads import download_to_file
from geodetect.validation import (
    ANNOTATION_TYPES,
    DetectorConfiguration,
    validate_choice,
    validate_uuid,
)

logger = logging.getLogger(__name__)

AnnotationType = Literal["outline", "training_area", "testing_area", "validation_area"]


class GeodetectClient(BaseAPIClient):
    """Main client class for the detection API"""

    def upload_raster(
        self,
        filename: str | os.PathLike[str],
        name: str | None = None,
        folder_id: str | None = None,
    ) -> str:
        """
        Upload a raster

        The call returns once the server has finished processing the raster, so the
        returned id can be used straight away (eg to run a detector on it).

        Args:
            filename: Local filename of raster to upload
            name: A human-readable name for this raster
            folder_id: Id of the folder this raster belongs to; if not provided, the
                raster will be put in the default API folder

        Returns:
            raster_id: The id of the uploaded raster

        Raises:
            ValidationError: The file does not exist
            APIError: The API or the storage answered with an error status
            OperationFailed: The server could not process the raster
            TimedOut: The raster was not ready within the operation timeout
        """
        data: dict[str, Any] = {}
        if name is not None:
            data["name"] = name
        if folder_id is not None:
            data["folder_id"] = folder_id
        raster_id, _ = self._staged_upload(
            "rasters/upload/file/",
            "rasters/{upload_id}/commit/",
            filename,
            initiate_body=data,
            id_field="raster_id",
        )
        logger.info("Raster %s is ready" % raster_id)
        return raster_id

    def list_rasters(
        self, folder_id: str | None = None, search_string: str | None = None
    ) -> list[dict[str, Any]]:
        """
        List of rasters metadata, going through all the pages

        Args:
            folder_id: The id of the folder to search rasters in
            search_string: The search term used to filter rasters by name

        Returns:
            A list of rasters dictionaries

        Example:

            ::

                {
                    'id': '42',
                    'status': 'ready',
                    'name': 'raster1',
                    'folder_id': 'abc'
                },
                {
                    'id': '43',
                    'status': 'ready',
                    'name': 'raster2',
                    'folder_id': 'def'
                }

        """
        params: dict[str, Any] = {}
        if folder_id:
            params["folder"] = folder_id
        if search_string:
            params["search"] = search_string.strip()
        return self._paginate_through_list("rasters", params)

    def get_raster(self, raster_id: str) -> dict[str, Any]:
        """
        Get raster information

        Args:
            raster_id: id of the raster

        Raises:
            APIError: There was an error while getting the raster information

        Returns:
            dict: Dictionary of the information
        """
        resp = self._request("rasters/%s/" % raster_id)
        _check_resp_is_ok(resp)
        return resp.json()

    def delete_raster(self, raster_id: str):
        """
        Deletes a given raster by its identifier

        Args:
            raster_id: The id of the raster to delete

        Raises:
            APIError: There was an error while trying to delete the raster
        """
        resp = self._request("rasters/%s/" % raster_id, "DELETE")
        _check_resp_is_ok(resp)

    def set_raster_detection_areas_from_file(
        self, raster_id: str, filename: str | os.PathLike[str]
    ) -> bool:
        """
        Set detection areas from a GeoJSON file, replacing the previous ones

        Args:
            raster_id: The id of the raster to which to assign the detection areas
            filename: The filename of a GeoJSON file. This should contain a FeatureCollection
                of Polygon/MultiPolygon

        Raises:
            APIError: There was an error uploading the file to cloud storage
        """
        self._staged_upload(
            "rasters/%s/detection_areas/upload/file/" % raster_id,
            "rasters/%s/detection_areas/upload/{upload_id}/commit/" % raster_id,
            filename,
        )
        return True

    def remove_raster_detection_areas(self, raster_id: str):
        """
        Remove the detection areas of a raster

        Args:
            raster_id: The id of the raster whose detection areas will be removed

        Raises:
            APIError: There was an error during the operation
        """
        resp = self._request("rasters/%s/detection_areas/" % raster_id, "DELETE")
        _check_resp_is_ok(resp)

    def create_detector(
        self,
        name: str | None = None,
        detection_type: str = "count",
        output_type: str = "polygon",
        training_steps: int = 500,
    ) -> str:
        """
        Creates a new detector

        Args:
            name: Name of the detector
            detection_type: Type of the detector (one of 'count', 'segmentation')
            output_type: Output type of the detector (one of 'polygon', 'bbox')
            training_steps: Training steps the detector (integer between 500 & 40000)

        Returns:
            The id of the detector

        Raises:
            ValidationError: One of the settings is not allowed; nothing is sent
            APIError: There was an error while creating the detector
        """
        configuration = DetectorConfiguration(detection_type, output_type, training_steps)
        body_data: dict[str, Any] = {"configuration": configuration.validate().to_json()}
        if name:
            body_data["name"] = name
        resp = self._request("detectors/", "POST", json=body_data)
        _check_resp_is_ok(resp)
        return resp.json()["id"]

    def get_detector(self, detector_id: str) -> dict[str, Any]:
        resp = self._request("detectors/%s/" % detector_id)
        _check_resp_is_ok(resp)
        return resp.json()

    def list_detectors(self, search_string: str | None = None) -> list[dict[str, Any]]:
        """
        List all the detectors the user can access, going through all the pages

        Args:
            search_string: The term used to filter detectors by name

        Returns:
            A list of detectors dictionaries

        Example:

            ::

                {
                    'id': '42',
                    'name': 'cow detector',
                    'configuration': {
                        'detection_type': 'count',
                        'output_type': 'bbox',
                        'training_steps': 787
                    }
                }

        """
        params: dict[str, Any] = {}
        if search_string is not None:
            params["search"] = search_string.strip()
        return self._paginate_through_list("detectors", params)

    def edit_detector(
        self,
        detector_id: str,
        name: str | None = None,
        detection_type: str | None = None,
        output_type: str | None = None,
        training_steps: int | None = None,
    ):
        """
        Edit a detector

        Only the given settings are checked and changed, the others are left untouched.

        Args:
            detector_id: identifier of the detector
            name: Name of the detector
            detection_type: The type of the detector (one of 'count', 'segmentation')
            output_type: The output type of the detector (one of 'polygon', 'bbox')
            training_steps: The training steps the detector (int in [500, 40000])

        Raises:
            ValidationError: One of the given settings is not allowed; nothing is sent
            APIError: There was an error while editing the detector
        """
        configuration = DetectorConfiguration(detection_type, output_type, training_steps)
        body_data: dict[str, Any] = {}
        if name:
            body_data["name"] = name
        changes = configuration.validate().to_json()
        if changes:
            body_data["configuration"] = changes
        resp = self._request("detectors/%s/" % detector_id, "PUT", json=body_data)
        _check_resp_is_ok(resp)

    def delete_detector(self, detector_id: str):
        """
        Deletes a given detector by its identifier

        Args:
            detector_id: The id of the detector to delete

        Raises:
            APIError: There was an error while trying to delete the detector
        """
        resp = self._request("detectors/%s/" % detector_id, "DELETE")
        _check_resp_is_ok(resp)

    def add_raster_to_detector(self, raster_id: str, detector_id: str):
        """
        Associate a raster to a detector, as a training raster

        Args:
            detector_id: The id of the detector
            raster_id: The id of the raster

        Raises:
            APIError: There was an error adding the raster
        """
        resp = self._request(
            "detectors/%s/training_rasters/" % detector_id,
            "POST",
            json={"raster_id": raster_id},
        )
        _check_resp_is_ok(resp)

    def set_annotations(
        self,
        detector_id: str,
        raster_id: str,
        annotation_type: AnnotationType,
        annotations: dict[str, Any],
        class_id: str | None = None,
    ) -> bool:
        """
        Replaces the annotations of type 'annotation_type' with 'annotations', for the
        given raster-detector pair.

        Args:
            detector_id: The id of the detector
            raster_id: The id of the raster
            annotation_type: One of (outline, training_area, testing_area, validation_area)
            annotations: GeoJSON representation of the features to upload
            class_id: The class id to which to associate the new annotations. Only valid if
                annotation_type is "outline"

        Raises:
            ValidationError: annotation_type is not one of the allowed ones
            APIError: There was an error during the upload
        """
        kind = validate_choice("annotation_type", annotation_type, ANNOTATION_TYPES)
        url = "detectors/%s/training_rasters/%s/%s/upload/bulk/" % (detector_id, raster_id, kind)
        # class_id must be left out rather than sent as null
        body: dict[str, Any] = {}
        if class_id is not None:
            body["class_id"] = class_id
        self._staged_upload(
            url, url + "{upload_id}/commit/", annotations, commit_body=body
        )
        return True

    def train_detector(self, detector_id: str) -> bool:
        """
        Start the training of a detector and wait for it to finish

        Args:
            detector_id: The id of the detector
        """
        resp = self._request("detectors/%s/train/" % detector_id, "POST")
        _check_resp_is_ok(resp)
        self._wait_until_operation_completes(resp.json())
        return True

    def run_detector(self, detector_id: str, raster_id: str) -> str:
        """
        Runs a detector on a raster and waits for the detection to finish

        Args:
            detector_id: The id of the detector
            raster_id: The id of the raster

        Returns:
            operation_id: The id of the operation. You typically want to pass this
                to `download_result_to_file`

        Raises:
            ValidationError: One of the ids is not a UUID; nothing is sent
        """
        validate_uuid("detector_id", detector_id)
        validate_uuid("raster_id", raster_id)
        resp = self._request(
            "detectors/%s/run/" % detector_id, "POST", json={"raster_id": raster_id}
        )
        _check_resp_is_ok(resp)
        operation_response = resp.json()
        self._wait_until_operation_completes(operation_response)
        return operation_response["operation_id"]

    def get_operation_results_url(self, operation_id: str) -> str:
        """
        Get the URL of the results of a finished detection

        Args:
            operation_id: The id of the detection operation

        Raises:
            APIError: The operation did not succeed (yet)
        """
        operation = self.get_operation(operation_id)
        if operation["status"] not in SUCCESS_STATUSES:
            raise APIError(
                "Operation %s not finished (status=%s)" % (operation_id, operation["status"])
            )
        return operation["results"]["url"]

    def download_result_to_file(self, operation_id: str, filename: str | os.PathLike[str]):
        """
        Downloads the results of a detection operation to a local GeoJSON file

        Only call this once `run_detector` has returned.

        Args:
            operation_id: The id of the operation to download
            filename: The local filename where to save the results
        """
        result_url = self.get_operation_results_url(operation_id)
        logger.debug("Trying to download result %s.." % result_url)
        download_to_file(result_url, filename)
