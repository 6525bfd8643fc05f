"""VPC, subnet, gateway and route table management for Elastic Beanstalk."""

from typing import Any

from botocore.exceptions import ClientError

from eb_deploy.core.deployments.elastic_beanstalk.errors import NetworkError
from eb_deploy.core.deployments.elastic_beanstalk.models import (
    DeploymentConfig,
    NetworkTopology,
    Reporter,
)

NAME_PREFIX = "ElasticBeanstalk"
VPC_CIDR = "10.0.0.0/16"
PUBLIC_SUBNET_CIDRS = ("10.0.1.0/24", "10.0.2.0/24")
DEFAULT_ROUTE_CIDR = "0.0.0.0/0"


def ensure_network(session: Any, config: DeploymentConfig, reporter: Reporter) -> NetworkTopology:
    """Resolve or create the VPC, public subnets, gateway and route table."""
    ec2 = session.client("ec2")
    try:
        vpc_id = _resolve_vpc(ec2, config.vpc_id, reporter)
        subnet_ids = _resolve_public_subnets(ec2, vpc_id, config, reporter)
        igw_id = _ensure_internet_gateway(ec2, vpc_id, reporter)
        route_table_id = _ensure_route_table(ec2, vpc_id, igw_id, reporter)
        _associate_subnets(ec2, route_table_id, subnet_ids, reporter)
    except ClientError as exc:
        raise NetworkError(f"Failed to set up VPC infrastructure: {exc}") from exc

    topology = NetworkTopology(
        vpc_id=vpc_id,
        public_subnet_ids=subnet_ids,
        internet_gateway_id=igw_id,
        route_table_id=route_table_id,
    )
    reporter.success("VPC infrastructure setup complete")
    reporter.info(f"VPC: {topology.vpc_id}")
    reporter.info(f"Public Subnets: {', '.join(topology.public_subnet_ids)}")
    reporter.info(f"Internet Gateway: {topology.internet_gateway_id}")
    reporter.info(f"Public Route Table: {topology.route_table_id}")
    return topology


def available_zones(ec2: Any) -> list[str]:
    """Return the names of availability zones in state 'available'."""
    response = ec2.describe_availability_zones(
        Filters=[{"Name": "state", "Values": ["available"]}]
    )
    return [
        str(zone["ZoneName"])
        for zone in response.get("AvailabilityZones", [])
        if zone.get("State", "available") == "available"
    ]


def _resolve_vpc(ec2: Any, requested_vpc_id: str | None, reporter: Reporter) -> str:
    """Use the requested VPC, else the default VPC, else a tagged or new one."""
    if requested_vpc_id:
        reporter.info(f"Using provided VPC: {requested_vpc_id}")
        return requested_vpc_id

    reporter.info("No VPC ID provided. Attempting to use the default VPC...")
    default_vpc_id = _first_vpc(ec2, [{"Name": "isDefault", "Values": ["true"]}])
    if default_vpc_id:
        reporter.info(f"Using default VPC: {default_vpc_id}")
        return default_vpc_id

    name = f"{NAME_PREFIX}-VPC"
    tagged_vpc_id = _first_vpc(ec2, [{"Name": "tag:Name", "Values": [name]}])
    if tagged_vpc_id:
        reporter.info(f"Using existing VPC {name}: {tagged_vpc_id}")
        return tagged_vpc_id

    reporter.info("No default VPC found. Creating a new VPC...")
    vpc_id = str(ec2.create_vpc(CidrBlock=VPC_CIDR)["Vpc"]["VpcId"])
    _tag_resource(ec2, vpc_id, name)
    ec2.modify_vpc_attribute(VpcId=vpc_id, EnableDnsSupport={"Value": True})
    ec2.modify_vpc_attribute(VpcId=vpc_id, EnableDnsHostnames={"Value": True})
    reporter.success(f"Created new VPC: {vpc_id}")
    return vpc_id


def _first_vpc(ec2: Any, filters: list[dict[str, Any]]) -> str | None:
    """Return the first VPC matching the filters."""
    vpcs = ec2.describe_vpcs(Filters=filters).get("Vpcs", [])
    if not vpcs:
        return None
    return str(vpcs[0]["VpcId"])


def _resolve_public_subnets(
    ec2: Any,
    vpc_id: str,
    config: DeploymentConfig,
    reporter: Reporter,
) -> tuple[str, str]:
    """Use the supplied subnets, else reuse or create two in distinct zones."""
    supplied = config.public_subnet_ids
    if supplied:
        reporter.info(f"Using provided public subnets: {supplied[0]}, {supplied[1]}")
        return supplied

    names = [f"{NAME_PREFIX}-Public{index}" for index in (1, 2)]
    existing = [_find_tagged_subnet(ec2, vpc_id, name) for name in names]
    if all(existing):
        subnet_ids = [subnet[0] for subnet in existing if subnet]
        reporter.info(f"Using existing public subnets: {subnet_ids[0]}, {subnet_ids[1]}")
        return subnet_ids[0], subnet_ids[1]

    zones = available_zones(ec2)
    used_zones = {subnet[1] for subnet in existing if subnet and subnet[1]}
    free_zones = [zone for zone in zones if zone not in used_zones]
    if len(zones) < 2:
        raise NetworkError(f"Not enough availability zones in region {config.region}")

    reporter.info(f"Creating public subnets in VPC {vpc_id}...")
    subnet_ids: list[str] = []
    for index, name in enumerate(names):
        found = existing[index]
        if found:
            subnet_ids.append(found[0])
            continue
        zone = free_zones.pop(0)
        response = ec2.create_subnet(
            VpcId=vpc_id,
            CidrBlock=PUBLIC_SUBNET_CIDRS[index],
            AvailabilityZone=zone,
        )
        subnet_id = str(response["Subnet"]["SubnetId"])
        _tag_resource(ec2, subnet_id, name)
        ec2.modify_subnet_attribute(SubnetId=subnet_id, MapPublicIpOnLaunch={"Value": True})
        reporter.info(f"Created public subnet {index + 1}: {subnet_id} in {zone}")
        subnet_ids.append(subnet_id)

    return subnet_ids[0], subnet_ids[1]


def _find_tagged_subnet(ec2: Any, vpc_id: str, name: str) -> tuple[str, str | None] | None:
    """Return the id and zone of a subnet in the VPC carrying the given Name tag."""
    response = ec2.describe_subnets(
        Filters=[
            {"Name": "vpc-id", "Values": [vpc_id]},
            {"Name": "tag:Name", "Values": [name]},
        ]
    )
    subnets = response.get("Subnets", [])
    if not subnets:
        return None
    return str(subnets[0]["SubnetId"]), subnets[0].get("AvailabilityZone")


def _ensure_internet_gateway(ec2: Any, vpc_id: str, reporter: Reporter) -> str:
    """Return the gateway attached to the VPC, creating one if needed."""
    response = ec2.describe_internet_gateways(
        Filters=[{"Name": "attachment.vpc-id", "Values": [vpc_id]}]
    )
    gateways = response.get("InternetGateways", [])
    if gateways:
        igw_id = str(gateways[0]["InternetGatewayId"])
        reporter.info(f"Using existing Internet Gateway: {igw_id}")
        return igw_id

    reporter.info(f"Creating Internet Gateway for VPC {vpc_id}...")
    igw_id = str(ec2.create_internet_gateway()["InternetGateway"]["InternetGatewayId"])
    _tag_resource(ec2, igw_id, f"{NAME_PREFIX}-IGW")
    ec2.attach_internet_gateway(InternetGatewayId=igw_id, VpcId=vpc_id)
    reporter.success(f"Created and attached Internet Gateway: {igw_id}")
    return igw_id


def _ensure_route_table(ec2: Any, vpc_id: str, igw_id: str, reporter: Reporter) -> str:
    """Return a route table routing through the gateway, creating one if needed."""
    response = ec2.describe_route_tables(
        Filters=[
            {"Name": "vpc-id", "Values": [vpc_id]},
            {"Name": "route.gateway-id", "Values": [igw_id]},
        ]
    )
    tables = response.get("RouteTables", [])
    if tables:
        route_table_id = str(tables[0]["RouteTableId"])
        reporter.info(f"Using existing route table with IGW route: {route_table_id}")
        return route_table_id

    reporter.info(f"Creating public route table for VPC {vpc_id}...")
    route_table_id = str(ec2.create_route_table(VpcId=vpc_id)["RouteTable"]["RouteTableId"])
    _tag_resource(ec2, route_table_id, f"{NAME_PREFIX}-Public-RT")
    ec2.create_route(
        RouteTableId=route_table_id,
        DestinationCidrBlock=DEFAULT_ROUTE_CIDR,
        GatewayId=igw_id,
    )
    reporter.success(f"Created public route table with IGW route: {route_table_id}")
    return route_table_id


def _associate_subnets(
    ec2: Any,
    route_table_id: str,
    subnet_ids: tuple[str, str],
    reporter: Reporter,
) -> None:
    """Associate subnets with the route table unless already associated."""
    response = ec2.describe_route_tables(RouteTableIds=[route_table_id])
    associated = {
        assoc.get("SubnetId")
        for table in response.get("RouteTables", [])
        for assoc in table.get("Associations", [])
    }
    missing = [subnet_id for subnet_id in subnet_ids if subnet_id not in associated]
    if not missing:
        return

    reporter.info(f"Associating public subnets with route table {route_table_id}...")
    for subnet_id in missing:
        ec2.associate_route_table(RouteTableId=route_table_id, SubnetId=subnet_id)


def _tag_resource(ec2: Any, resource_id: str, name: str) -> None:
    """Apply a Name tag to a resource."""
    ec2.create_tags(Resources=[resource_id], Tags=[{"Key": "Name", "Value": name}])
