"""
Tests for message endpoints.
"""

from classifieds.services import chat_service
from tests.helpers import make_listing, make_message, new_user_id, user_headers


class TestSendMessage:
    """Tests for POST /api/listings/:id/messages"""

    def test_buyer_writes_to_seller(self, client, active_listing, buyer_id, seller_id):
        response = client.post(
            f'/api/listings/{active_listing}/messages',
            json={'text': 'Is it still available?', 'receiver_id': 'ignored'},
            headers=user_headers(buyer_id),
        )

        assert response.status_code == 201
        message = response.json['message']
        assert message['sender_id'] == buyer_id
        assert message['receiver_id'] == seller_id
        assert message['read'] is False

    def test_seller_replies_to_buyer(self, client, active_listing, buyer_id, seller_id):
        response = client.post(
            f'/api/listings/{active_listing}/messages',
            json={'text': 'Yes it is', 'receiver_id': buyer_id},
            headers=user_headers(seller_id),
        )

        assert response.status_code == 201
        assert response.json['message']['receiver_id'] == buyer_id

    def test_seller_reply_needs_receiver(self, client, active_listing, seller_id):
        response = client.post(
            f'/api/listings/{active_listing}/messages',
            json={'text': 'Hello?'},
            headers=user_headers(seller_id),
        )

        assert response.status_code == 400

    def test_empty_text(self, client, active_listing, buyer_id):
        response = client.post(
            f'/api/listings/{active_listing}/messages',
            json={'text': '   '},
            headers=user_headers(buyer_id),
        )

        assert response.status_code == 400

    def test_too_long(self, client, active_listing, buyer_id):
        response = client.post(
            f'/api/listings/{active_listing}/messages',
            json={'text': 'x' * 5001},
            headers=user_headers(buyer_id),
        )

        assert response.status_code == 400
        assert response.json['error'] == 'Сообщение слишком длинное (максимум 5000 символов).'
        assert chat_service.get_messages_for_listing(active_listing, buyer_id) == []

    def test_unknown_listing(self, client, buyer_id):
        response = client.post(
            '/api/listings/99999/messages',
            json={'text': 'hello'},
            headers=user_headers(buyer_id),
        )

        assert response.status_code == 404

    def test_requires_user(self, client, active_listing):
        response = client.post(f'/api/listings/{active_listing}/messages', json={'text': 'hello'})

        assert response.status_code == 401


class TestGetMessages:
    """Tests for GET /api/listings/:id/messages"""

    def test_only_participant_messages(self, client, active_listing, buyer_id, seller_id):
        make_message(active_listing, buyer_id, seller_id, text='mine')
        make_message(active_listing, new_user_id(), seller_id, text='not mine')

        response = client.get(f'/api/listings/{active_listing}/messages', headers=user_headers(buyer_id))

        assert response.status_code == 200
        assert [m['text'] for m in response.json['messages']] == ['mine']


class TestMarkRead:
    """Tests for PUT /api/listings/:id/messages/read"""

    def test_mark_read(self, client, active_listing, buyer_id, seller_id):
        make_message(active_listing, seller_id, buyer_id)
        make_message(active_listing, seller_id, buyer_id)

        response = client.put(f'/api/listings/{active_listing}/messages/read', headers=user_headers(buyer_id))

        assert response.status_code == 200
        assert response.json['messages_marked_read'] == 2
        assert chat_service.count_unread_for_user(buyer_id) == 0


class TestChats:
    """Tests for GET /api/messages/chats and /api/messages/unread-count"""

    def test_chats(self, client, seller_id, buyer_id):
        listing_id = make_listing(seller_id, title='Guitar', images=[])
        make_message(listing_id, buyer_id, seller_id, text='Does it come with a case?')

        response = client.get('/api/messages/chats', headers=user_headers(seller_id))

        assert response.status_code == 200
        chat = response.json['chats'][0]
        assert chat['listing_title'] == 'Guitar'
        assert chat['listing_image'] == f'https://picsum.photos/seed/{listing_id}'
        assert chat['last_message_text'] == 'Does it come with a case?'
        assert chat['unread_count'] == 1
        assert response.json['total_unread'] == 1

    def test_no_chats(self, client, buyer_id):
        response = client.get('/api/messages/chats', headers=user_headers(buyer_id))

        assert response.status_code == 200
        assert response.json['chats'] == []

    def test_unread_count(self, client, seller_id, buyer_id):
        first = make_listing(seller_id)
        second = make_listing(seller_id)
        make_message(first, buyer_id, seller_id)
        make_message(second, buyer_id, seller_id)
        make_message(second, buyer_id, seller_id, read=True)

        total = client.get('/api/messages/unread-count', headers=user_headers(seller_id))
        one = client.get(f'/api/messages/unread-count?listing_id={first}', headers=user_headers(seller_id))

        assert total.json['unread_count'] == 2
        assert one.json['unread_count'] == 1
