"""
TripLink Backend — Messaging Service Tests
============================================

What we test:
    ✅ Conversation keys are symmetric and include the context
    ✅ send() validates participants, body, type and context target
    ✅ mark_read() is receiver-only and idempotent
    ✅ list_conversation() is participant-only, oldest first
"""

import pytest

from triplink.exceptions import ForbiddenError, NotFoundError, ValidationError
from triplink.models import ContextType, Message, MessageStatus, MessageType
from triplink.schemas.message import MessageContext
from triplink.services.messaging_service import MessagingService, conversation_key


class TestConversationKey:

    def test_symmetric(self):
        assert conversation_key(7, 3) == conversation_key(3, 7) == "3:7"

    def test_context_is_part_of_key(self):
        ctx = MessageContext(kind=ContextType.BOOKING, id=12)
        assert conversation_key(7, 3, ctx) == "3:7:booking:12"
        assert conversation_key(7, 3, ctx) != conversation_key(7, 3)


class TestSend:

    def setup_method(self):
        self.service = MessagingService()

    @pytest.mark.asyncio
    async def test_send_creates_unread_message(self, db_session, traveler, provider):
        message = await self.service.send(
            db_session, traveler.id, provider.id, "Hello!", MessageType.EXPERT_INQUIRY
        )

        assert message.status is MessageStatus.UNREAD
        assert message.conversation_id == conversation_key(traveler.id, provider.id)
        assert message.context_id is None and message.context_type is None

    @pytest.mark.asyncio
    async def test_send_accepts_type_as_string(self, db_session, traveler, provider):
        message = await self.service.send(
            db_session, traveler.id, provider.id, "Hello!", "trip_discussion"
        )
        assert message.message_type is MessageType.TRIP_DISCUSSION

    @pytest.mark.asyncio
    async def test_unknown_type_rejected(self, db_session, traveler, provider):
        with pytest.raises(ValidationError) as exc_info:
            await self.service.send(db_session, traveler.id, provider.id, "Hello!", "gossip")
        assert exc_info.value.field == "messageType"

    @pytest.mark.asyncio
    async def test_blank_body_rejected(self, db_session, traveler, provider):
        with pytest.raises(ValidationError):
            await self.service.send(
                db_session, traveler.id, provider.id, "   ", MessageType.EXPERT_INQUIRY
            )

    @pytest.mark.asyncio
    async def test_message_to_self_rejected(self, db_session, traveler):
        with pytest.raises(ValidationError):
            await self.service.send(
                db_session, traveler.id, traveler.id, "Hi me", MessageType.EXPERT_INQUIRY
            )

    @pytest.mark.asyncio
    async def test_unknown_receiver_not_found(self, db_session, traveler):
        with pytest.raises(NotFoundError) as exc_info:
            await self.service.send(
                db_session, traveler.id, 9999, "Hello?", MessageType.EXPERT_INQUIRY
            )
        assert exc_info.value.resource == "user"

    @pytest.mark.asyncio
    async def test_context_target_must_exist(self, db_session, traveler, provider):
        with pytest.raises(NotFoundError) as exc_info:
            await self.service.send(
                db_session,
                traveler.id,
                provider.id,
                "About that trip",
                MessageType.TRIP_DISCUSSION,
                MessageContext(kind=ContextType.TRIP, id=77),
            )
        assert exc_info.value.resource == "trip"

    @pytest.mark.asyncio
    async def test_context_on_existing_service(self, db_session, traveler, provider, tour_service):
        message = await self.service.send(
            db_session,
            traveler.id,
            provider.id,
            "Is lunch included?",
            MessageType.EXPERT_INQUIRY,
            MessageContext(kind=ContextType.SERVICE, id=tour_service.id),
        )

        assert message.context_type is ContextType.SERVICE
        assert message.conversation_id.endswith(f":service:{tour_service.id}")


class TestMarkRead:

    def setup_method(self):
        self.service = MessagingService()

    @pytest.mark.asyncio
    async def test_receiver_marks_read_twice(self, db_session, traveler, provider):
        sent = await self.service.send(
            db_session, traveler.id, provider.id, "Hello!", MessageType.EXPERT_INQUIRY
        )

        first = await self.service.mark_read(db_session, sent.id, provider.id)
        second = await self.service.mark_read(db_session, sent.id, provider.id)

        assert first.status is MessageStatus.READ
        assert second.status is MessageStatus.READ

    @pytest.mark.asyncio
    async def test_sender_cannot_mark_read(self, db_session, traveler, provider):
        sent = await self.service.send(
            db_session, traveler.id, provider.id, "Hello!", MessageType.EXPERT_INQUIRY
        )

        with pytest.raises(ForbiddenError):
            await self.service.mark_read(db_session, sent.id, traveler.id)

    @pytest.mark.asyncio
    async def test_third_party_cannot_mark_read(self, db_session, traveler, provider, outsider):
        sent = await self.service.send(
            db_session, traveler.id, provider.id, "Hello!", MessageType.EXPERT_INQUIRY
        )

        with pytest.raises(ForbiddenError):
            await self.service.mark_read(db_session, sent.id, outsider.id)

        stored = await db_session.get(Message, sent.id, populate_existing=True)
        assert stored.status == MessageStatus.UNREAD.value

    @pytest.mark.asyncio
    async def test_missing_message_not_found(self, db_session, provider):
        with pytest.raises(NotFoundError):
            await self.service.mark_read(db_session, 9999, provider.id)


class TestListConversation:

    def setup_method(self):
        self.service = MessagingService()

    @pytest.mark.asyncio
    async def test_participants_see_thread_in_order(self, db_session, traveler, provider):
        await self.service.send(db_session, traveler.id, provider.id, "one", MessageType.EXPERT_INQUIRY)
        await self.service.send(db_session, provider.id, traveler.id, "two", MessageType.EXPERT_INQUIRY)
        await self.service.send(db_session, traveler.id, provider.id, "three", MessageType.EXPERT_INQUIRY)
        key = conversation_key(traveler.id, provider.id)

        as_traveler = await self.service.list_conversation(db_session, key, traveler.id)
        as_provider = await self.service.list_conversation(db_session, key, provider.id)

        assert [m.message for m in as_traveler] == ["one", "two", "three"]
        assert [m.id for m in as_provider] == [m.id for m in as_traveler]

    @pytest.mark.asyncio
    async def test_outsider_forbidden(self, db_session, traveler, provider, outsider):
        await self.service.send(db_session, traveler.id, provider.id, "private", MessageType.EXPERT_INQUIRY)

        with pytest.raises(ForbiddenError):
            await self.service.list_conversation(
                db_session, conversation_key(traveler.id, provider.id), outsider.id
            )

    @pytest.mark.asyncio
    async def test_empty_conversation_forbidden(self, db_session, traveler):
        with pytest.raises(ForbiddenError):
            await self.service.list_conversation(db_session, "1:2", traveler.id)
