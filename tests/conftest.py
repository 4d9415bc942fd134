from __future__ import annotations

import pytest

from s3_broker.services.config import AwsConfig, CredentialsConfig, NamingConfig
from s3_broker.services.iam_service import IamService
from s3_broker.services.naming import ResourceNamer
from s3_broker.services.plan import BasicPlan
from s3_broker.services.policy import BucketGroupPolicy
from s3_broker.services.s3_service import S3Service
from tests.fakes import FakeIam, FakeS3, FakeSession


@pytest.fixture
def namer() -> ResourceNamer:
    return ResourceNamer(NamingConfig())


@pytest.fixture
def aws_config() -> AwsConfig:
    return AwsConfig(region_name="us-east-1")


@pytest.fixture
def policy() -> BucketGroupPolicy:
    return BucketGroupPolicy.from_file()


@pytest.fixture
def journal() -> list[tuple[str, str]]:
    """Calls made against both fake services, in order."""

    return []


@pytest.fixture
def fake_s3(journal: list[tuple[str, str]]) -> FakeS3:
    return FakeS3(journal=journal)


@pytest.fixture
def fake_iam(journal: list[tuple[str, str]]) -> FakeIam:
    return FakeIam(journal=journal)


@pytest.fixture
def session(fake_s3: FakeS3, fake_iam: FakeIam) -> FakeSession:
    return FakeSession(s3=fake_s3, iam=fake_iam)


@pytest.fixture
def s3_service(aws_config: AwsConfig, namer: ResourceNamer, session: FakeSession) -> S3Service:
    return S3Service(aws_config, namer, session=session)


@pytest.fixture
def iam_service(
    aws_config: AwsConfig,
    namer: ResourceNamer,
    policy: BucketGroupPolicy,
    session: FakeSession,
) -> IamService:
    return IamService(aws_config, namer, policy, session=session)


@pytest.fixture
def plan(s3_service: S3Service, iam_service: IamService) -> BasicPlan:
    return BasicPlan(s3=s3_service, iam=iam_service, credentials=CredentialsConfig())
