"""
tests/core/data/inventory/test_seeds.py - 이벤트 기반 seed 추출 테스트
"""

from core.data.inventory.seeds import instance_seeds, seeds_from_event
from core.data.inventory.types import ChangedObject, ResourceKind


class TestInstanceSeeds:
    def test_instance_seeds(self):
        assert instance_seeds(["i-1", "i-2"]) == [
            ChangedObject(ResourceKind.INSTANCE, "i-1"),
            ChangedObject(ResourceKind.INSTANCE, "i-2"),
        ]


class TestSeedsFromEvent:
    """seeds_from_event 테스트"""

    def test_state_change(self):
        event = {
            "detail-type": "EC2 Instance State-change Notification",
            "detail": {"instance-id": "i-0abc", "state": "stopped"},
        }
        assert seeds_from_event(event) == [ChangedObject(ResourceKind.INSTANCE, "i-0abc")]

    def test_cloudtrail(self):
        """요청/응답 양쪽의 instancesSet에서 중복 없이 추출"""
        event = {
            "detail-type": "AWS API Call via CloudTrail",
            "detail": {
                "eventName": "RunInstances",
                "requestParameters": {"instancesSet": {"items": [{"imageId": "ami-1"}]}},
                "responseElements": {
                    "instancesSet": {"items": [{"instanceId": "i-1"}, {"instanceId": "i-2"}, {"instanceId": "i-1"}]}
                },
            },
        }

        assert [seed.ems_ref for seed in seeds_from_event(event)] == ["i-1", "i-2"]

    def test_cloudtrail_without_instances(self):
        event = {"detail-type": "AWS API Call via CloudTrail", "detail": {"responseElements": None}}
        assert seeds_from_event(event) == []

    def test_unknown_event(self):
        assert seeds_from_event({"detail-type": "Scheduled Event", "detail": {}}) == []
